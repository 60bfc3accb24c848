from __future__ import annotations

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String, UniqueConstraint, func

from lockin.database import Base
from lockin.models._ids import new_id


class Match(Base):
    __tablename__ = "matches"
    __table_args__ = (
        UniqueConstraint("resume_id", "job_id", name="uq_match_resume_job"),
        Index("idx_match_resume_score", "resume_id", "score"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    resume_id = Column(String(36), ForeignKey("resumes.id", ondelete="CASCADE"), nullable=False)
    job_id = Column(String(36), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    score = Column(Float)
    matched_at = Column(DateTime, server_default=func.now())

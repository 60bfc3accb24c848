from __future__ import annotations

from sqlalchemy import Column, DateTime, Index, String, func
from sqlalchemy.types import JSON

from lockin.database import Base
from lockin.models._ids import new_id


class Job(Base):
    __tablename__ = "jobs"
    __table_args__ = (Index("idx_jobs_created_at", "created_at"),)

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    company = Column(String(255), nullable=False)
    location = Column(String(255))
    description = Column(String(2000))
    skills = Column(JSON)
    created_at = Column(DateTime, server_default=func.now())

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from lockin.models.job import Job
from lockin.models.match import Match
from lockin.models.resume import Resume
from lockin.schemas.resume import ResumeAnalysis
from lockin.services.errors import ResumeNotAnalyzedError
from lockin.services.matcher import JobMatcher

logger = logging.getLogger(__name__)


def insert_match_ignore_conflict(db: Session, resume_id: str, job_id: str, score: float) -> bool:
    """Write a Match row unless one already exists for (resume_id, job_id).

    Returns True when a row was inserted. An existing row keeps its first score.
    """
    dialect = db.get_bind().dialect.name
    insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
    statement = (
        insert(Match)
        .values(resume_id=resume_id, job_id=job_id, score=score)
        .on_conflict_do_nothing(index_elements=["resume_id", "job_id"])
    )
    result = db.execute(statement)
    return bool(result.rowcount)


def match_jobs_with_resume(db: Session, resume: Resume, matcher: JobMatcher) -> list[dict[str, Any]]:
    if not resume.analysis:
        raise ResumeNotAnalyzedError(resume.id)

    profile = ResumeAnalysis.model_validate(resume.analysis)
    matched: list[dict[str, Any]] = []
    inserted = 0

    for job in db.query(Job).order_by(Job.created_at.asc(), Job.id.asc()).all():
        result = matcher.score_against_stored_job(profile, job)
        if result.score <= 0:
            continue
        if insert_match_ignore_conflict(db, resume.id, job.id, result.score):
            inserted += 1
        matched.append({"job": job, "score": result.score, "matchedSkills": result.matching_skills})

    db.commit()
    logger.info("Resume %s matched %d jobs (%d new match rows)", resume.id, len(matched), inserted)

    # sorted() is stable, so equal scores keep their encounter order.
    return sorted(matched, key=lambda row: row["score"], reverse=True)

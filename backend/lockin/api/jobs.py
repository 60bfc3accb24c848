from __future__ import annotations

import math
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from lockin.api.deps import get_aggregator, get_matcher
from lockin.auth import get_current_user
from lockin.database import get_db
from lockin.models.job import Job
from lockin.models.resume import Resume
from lockin.models.user import User
from lockin.schemas.job import JobCreate, JobMatchOut, JobOut, JobScrapeRequest, JobSortBy, JobUpdate, SortOrder
from lockin.services.aggregator import JobAggregator
from lockin.services.errors import ResumeNotAnalyzedError
from lockin.services.job_ingest import scrape_and_store_jobs
from lockin.services.job_matching import match_jobs_with_resume
from lockin.services.matcher import JobMatcher


router = APIRouter()

SORT_COLUMNS = {
    "createdAt": Job.created_at,
    "title": Job.title,
    "company": Job.company,
}


def _get_job_or_404(db: Session, job_id: UUID) -> Job:
    job = db.query(Job).filter(Job.id == str(job_id)).first()
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.post("", status_code=201)
def create_job(payload: JobCreate, db: Session = Depends(get_db)) -> dict[str, Any]:
    job = Job(**payload.model_dump())
    db.add(job)
    db.commit()
    db.refresh(job)
    return {"success": True, "data": JobOut.model_validate(job)}


@router.get("")
def list_jobs(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    sort_by: JobSortBy = Query(default="createdAt"),
    sort_order: SortOrder = Query(default="desc"),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    column = SORT_COLUMNS[sort_by]
    ordering = column.asc() if sort_order == "asc" else column.desc()

    query = db.query(Job)
    total = query.count()
    jobs = query.order_by(ordering, Job.id.asc()).offset((page - 1) * limit).limit(limit).all()
    return {
        "success": True,
        "data": [JobOut.model_validate(job) for job in jobs],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit) if total else 0,
        },
    }


@router.post("/scrape")
async def scrape_jobs(
    payload: JobScrapeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    job_aggregator: JobAggregator = Depends(get_aggregator),
) -> dict[str, Any]:
    created = await scrape_and_store_jobs(db, job_aggregator, payload.terms, payload.location)
    return {"success": True, "message": f"Stored {created} new jobs", "data": {"created": created}}


@router.post("/match/{resume_id}")
def match_jobs(
    resume_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    job_matcher: JobMatcher = Depends(get_matcher),
) -> dict[str, Any]:
    resume = db.query(Resume).filter(Resume.id == str(resume_id), Resume.user_id == current_user.id).first()
    if not resume:
        raise HTTPException(status_code=404, detail="Resume not found")

    try:
        matched = match_jobs_with_resume(db, resume, job_matcher)
    except ResumeNotAnalyzedError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return {
        "success": True,
        "data": [
            JobMatchOut(job=JobOut.model_validate(row["job"]), score=row["score"], matchedSkills=row["matchedSkills"])
            for row in matched
        ],
    }


@router.get("/{job_id}")
def get_job(job_id: UUID, db: Session = Depends(get_db)) -> dict[str, Any]:
    return {"success": True, "data": JobOut.model_validate(_get_job_or_404(db, job_id))}


@router.patch("/{job_id}")
def update_job(job_id: UUID, payload: JobUpdate, db: Session = Depends(get_db)) -> dict[str, Any]:
    job = _get_job_or_404(db, job_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(job, field, value)
    db.add(job)
    db.commit()
    db.refresh(job)
    return {"success": True, "data": JobOut.model_validate(job)}


@router.delete("/{job_id}")
def delete_job(job_id: UUID, db: Session = Depends(get_db)) -> dict[str, Any]:
    job = _get_job_or_404(db, job_id)
    db.delete(job)
    db.commit()
    return {"success": True, "message": "Job deleted"}

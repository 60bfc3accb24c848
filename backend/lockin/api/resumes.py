from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from lockin.api.deps import get_analyzer, get_parser, get_recommender
from lockin.auth import get_current_user
from lockin.config import settings
from lockin.database import get_db
from lockin.models._ids import new_id
from lockin.models.resume import Resume
from lockin.models.user import User
from lockin.schemas.recommendation import RecommendationOut
from lockin.schemas.resume import ResumeOut, ResumeUpdate
from lockin.services.errors import LLMError, ResumeNotAnalyzedError
from lockin.services.recommender import RecommendationService
from lockin.services.resume_analyzer import ResumeAnalyzer
from lockin.services.resume_parser import SUPPORTED_SUFFIXES, ResumeParser


logger = logging.getLogger(__name__)
router = APIRouter()


def _get_resume_or_404(db: Session, resume_id: UUID, user: User) -> Resume:
    resume = db.query(Resume).filter(Resume.id == str(resume_id), Resume.user_id == user.id).first()
    if not resume:
        raise HTTPException(status_code=404, detail="Resume not found")
    return resume


@router.post("", status_code=201)
def upload_resume(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    resume_parser: ResumeParser = Depends(get_parser),
) -> dict[str, Any]:
    if not file.filename:
        raise HTTPException(status_code=400, detail="Missing filename")

    suffix = Path(file.filename).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise HTTPException(status_code=400, detail="Only PDF and DOCX files are supported")

    raw = file.file.read()
    max_bytes = settings.max_resume_size_mb * 1024 * 1024
    if len(raw) > max_bytes:
        raise HTTPException(status_code=400, detail=f"File exceeds {settings.max_resume_size_mb}MB")

    resume_id = new_id()
    safe_name = re.sub(r"[^A-Za-z0-9._-]", "_", Path(file.filename).name)
    stored_name = f"{resume_id}_{safe_name}"
    target = Path(settings.upload_dir) / stored_name
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(raw)

    try:
        raw_text = resume_parser.extract_text(str(target))
    except Exception as exc:
        logger.warning("Text extraction failed for %s: %s", target, exc)
        target.unlink(missing_ok=True)
        raise HTTPException(status_code=400, detail="Failed to extract text from resume") from exc

    resume = Resume(
        id=resume_id,
        user_id=current_user.id,
        filename=safe_name,
        file_path=str(target),
        file_url=f"/uploads/{stored_name}",
        raw_text=raw_text,
    )
    db.add(resume)
    db.commit()
    db.refresh(resume)
    return {"success": True, "message": "Resume uploaded", "data": ResumeOut.model_validate(resume)}


@router.get("")
def list_resumes(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    resumes = (
        db.query(Resume)
        .filter(Resume.user_id == current_user.id)
        .order_by(Resume.created_at.desc(), Resume.id.asc())
        .all()
    )
    return {"success": True, "data": [ResumeOut.model_validate(resume) for resume in resumes]}


@router.get("/{resume_id}")
def get_resume(
    resume_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    return {"success": True, "data": ResumeOut.model_validate(_get_resume_or_404(db, resume_id, current_user))}


@router.put("/{resume_id}")
def update_resume(
    resume_id: UUID,
    payload: ResumeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    resume = _get_resume_or_404(db, resume_id, current_user)
    resume.analysis = payload.analysis.model_dump() if payload.analysis else None
    db.add(resume)
    db.commit()
    db.refresh(resume)
    return {"success": True, "message": "Resume updated", "data": ResumeOut.model_validate(resume)}


@router.delete("/{resume_id}")
def delete_resume(
    resume_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    resume = _get_resume_or_404(db, resume_id, current_user)
    try:
        Path(resume.file_path).unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove %s: %s", resume.file_path, exc)

    db.delete(resume)
    db.commit()
    return {"success": True, "message": "Resume deleted"}


@router.post("/{resume_id}/analyze")
async def analyze_resume(
    resume_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    resume_analyzer: ResumeAnalyzer = Depends(get_analyzer),
) -> dict[str, Any]:
    resume = _get_resume_or_404(db, resume_id, current_user)
    if not (resume.raw_text or "").strip():
        raise HTTPException(status_code=400, detail="Resume has no extractable text")

    try:
        analysis = await resume_analyzer.analyze(resume.raw_text)
    except LLMError as exc:
        logger.warning("Resume %s analysis failed: %s", resume.id, exc)
        raise HTTPException(status_code=502, detail="Resume analysis failed") from exc

    resume.analysis = analysis.model_dump()
    db.add(resume)
    db.commit()
    db.refresh(resume)
    return {"success": True, "message": "Resume analyzed", "data": ResumeOut.model_validate(resume)}


@router.get("/{resume_id}/recommendations")
async def get_recommendations(
    resume_id: UUID,
    location: str | None = Query(default=None, max_length=255),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    recommendation_service: RecommendationService = Depends(get_recommender),
) -> dict[str, Any]:
    resume = _get_resume_or_404(db, resume_id, current_user)
    try:
        recommendations = await recommendation_service.generate(resume, location)
    except ResumeNotAnalyzedError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if not recommendations:
        return {"success": True, "message": "No strong job matches found.", "data": []}
    return {"success": True, "data": [RecommendationOut(**row) for row in recommendations]}

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class EducationEntry(BaseModel):
    degree: str
    institution: str
    year: int | None = None


class ResumeAnalysis(BaseModel):
    """Structured profile extracted from resume text by the LLM.

    Skills keep the order and casing the model returned them in; matching
    code lower-cases at comparison time instead of normalizing here.
    """

    skills: list[str] = Field(default_factory=list)
    experience: float = Field(default=0, ge=0)
    education: list[EducationEntry] | None = None
    summary: str | None = None
    strengths: list[str] | None = None
    improvements: list[str] | None = None
    keywords: list[str] | None = None


class ResumeOut(BaseModel):
    id: str
    user_id: str
    filename: str
    file_url: str
    analysis: ResumeAnalysis | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class ResumeUpdate(BaseModel):
    analysis: ResumeAnalysis | None = None

from __future__ import annotations

from pydantic import BaseModel


class RecommendationOut(BaseModel):
    jobTitle: str
    company: str
    location: str
    description: str
    requirements: list[str]
    salary: str | None = None
    jobUrl: str
    source: str
    postedDate: str | None = None
    compatibilityScore: float
    matchingSkills: list[str]
    missingSkills: list[str]
    reasoning: str

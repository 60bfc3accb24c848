from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class JobCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    company: str = Field(min_length=1, max_length=255)
    location: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    skills: list[str] | None = None


class JobUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    company: str | None = Field(default=None, min_length=1, max_length=255)
    location: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    skills: list[str] | None = None


class JobOut(BaseModel):
    id: str
    title: str
    company: str
    location: str | None = None
    description: str | None = None
    skills: list[str] | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class JobMatchOut(BaseModel):
    job: JobOut
    score: float
    matchedSkills: list[str]


class JobScrapeRequest(BaseModel):
    terms: list[str] = Field(min_length=1)
    location: str | None = None


JobSortBy = Literal["createdAt", "title", "company"]
SortOrder = Literal["asc", "desc"]

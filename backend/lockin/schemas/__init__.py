from lockin.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserPublic
from lockin.schemas.job import JobCreate, JobMatchOut, JobOut, JobScrapeRequest, JobUpdate
from lockin.schemas.recommendation import RecommendationOut
from lockin.schemas.resume import EducationEntry, ResumeAnalysis, ResumeOut, ResumeUpdate

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "RegisterRequest",
    "UserPublic",
    "JobCreate",
    "JobUpdate",
    "JobOut",
    "JobMatchOut",
    "JobScrapeRequest",
    "RecommendationOut",
    "EducationEntry",
    "ResumeAnalysis",
    "ResumeOut",
    "ResumeUpdate",
]

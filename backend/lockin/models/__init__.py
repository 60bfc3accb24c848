from lockin.models.job import Job
from lockin.models.match import Match
from lockin.models.resume import Resume
from lockin.models.user import User

__all__ = ["Resume", "Job", "Match", "User"]

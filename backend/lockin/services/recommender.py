from __future__ import annotations

import logging
from typing import Any

from lockin.config import Settings
from lockin.models.resume import Resume
from lockin.schemas.resume import ResumeAnalysis
from lockin.services.aggregator import JobAggregator
from lockin.services.errors import ResumeNotAnalyzedError
from lockin.services.matcher import JobMatcher
from lockin.services.postings import CompatibilityResult, RawJobPosting

logger = logging.getLogger(__name__)


class RecommendationService:
    """Scrape postings for a resume's skills and rank them with the LLM scorer.

    Runs fetching -> scoring -> ranking in one call. Nothing is persisted; the
    ranked list is the only output.
    """

    def __init__(self, aggregator: JobAggregator, matcher: JobMatcher, config: Settings) -> None:
        self.aggregator = aggregator
        self.matcher = matcher
        self.threshold = config.recommendation_threshold
        self.limit = config.recommendation_limit

    async def generate(self, resume: Resume, location: str | None = None) -> list[dict[str, Any]]:
        if not resume.analysis:
            raise ResumeNotAnalyzedError(resume.id)

        profile = ResumeAnalysis.model_validate(resume.analysis)
        logger.info("Recommendations for resume %s: fetching (skills: %s)", resume.id, ", ".join(profile.skills))
        postings = await self.aggregator.collect(profile.skills, location)

        logger.info("Recommendations for resume %s: scoring %d postings", resume.id, len(postings))
        recommendations: list[dict[str, Any]] = []
        for posting in postings:
            compatibility = await self.matcher.score_against_scraped_posting(profile, posting)
            if compatibility.score >= self.threshold:
                recommendations.append(to_recommendation(posting, compatibility))

        logger.info("Recommendations for resume %s: ranking %d candidates", resume.id, len(recommendations))
        ranked = sorted(recommendations, key=lambda row: row["compatibilityScore"], reverse=True)
        return ranked[: self.limit]


def to_recommendation(posting: RawJobPosting, compatibility: CompatibilityResult) -> dict[str, Any]:
    scored = compatibility.to_dict()
    scored["compatibilityScore"] = scored.pop("score")
    return {
        "jobTitle": posting.title,
        "company": posting.company,
        "location": posting.location,
        "description": posting.description,
        "requirements": posting.requirements,
        "salary": posting.salary,
        "jobUrl": posting.url,
        "source": posting.source,
        "postedDate": posting.posted_date,
        **scored,
    }

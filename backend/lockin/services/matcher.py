from __future__ import annotations

import logging
import math
from typing import Any, Protocol

from lockin.services.errors import LLMError
from lockin.services.llm_client import LLMClient
from lockin.services.postings import CompatibilityResult, RawJobPosting
from lockin.schemas.resume import ResumeAnalysis

logger = logging.getLogger(__name__)

EXPERIENCE_BONUS = 0.5
DEFAULT_DESCRIPTION_CHARS = 500

COMPATIBILITY_SYSTEM_PROMPT = "You are a job matching expert. Respond only with valid JSON."
COMPATIBILITY_PROMPT = """
Analyze compatibility between this resume and job. Return ONLY valid JSON:

{{
  "score": number (0-100),
  "matchingSkills": [string],
  "missingSkills": [string],
  "reasoning": string
}}

Resume Skills: {skills}
Experience: {experience} years

Job: {title} at {company}
Requirements: {requirements}
Description: {description}
""".strip()


class StoredJobLike(Protocol):
    skills: Any
    description: Any


class JobMatcher:
    """Scores a resume profile against jobs.

    ``score_against_stored_job`` is the cheap keyword-overlap heuristic used for
    persisted jobs; ``score_against_scraped_posting`` asks the LLM for a 0-100
    judgment on an ephemeral posting. The two scales are independent.
    """

    def __init__(self, llm_client: LLMClient, description_chars: int = DEFAULT_DESCRIPTION_CHARS) -> None:
        self.llm_client = llm_client
        self.description_chars = description_chars

    def score_against_stored_job(self, profile: ResumeAnalysis, job: StoredJobLike) -> CompatibilityResult:
        job_skills = [str(skill) for skill in (job.skills or []) if skill]
        job_skills_lower = [skill.lower() for skill in job_skills]

        score = 0.0
        matched: list[str] = []
        hit_tags: set[int] = set()
        for resume_skill in profile.skills:
            needle = resume_skill.strip().lower()
            if not needle:
                continue
            hits = [idx for idx, tag in enumerate(job_skills_lower) if needle in tag]
            if hits:
                score += 1
                matched.append(resume_skill)
                hit_tags.update(hits)

        description = str(job.description or "").lower()
        if profile.experience and "experience" in description:
            score += EXPERIENCE_BONUS

        missing = [skill for idx, skill in enumerate(job_skills) if idx not in hit_tags]
        return CompatibilityResult(score=score, matching_skills=matched, missing_skills=missing)

    async def score_against_scraped_posting(
        self,
        profile: ResumeAnalysis,
        posting: RawJobPosting,
    ) -> CompatibilityResult:
        prompt = self.build_compatibility_prompt(profile, posting)
        try:
            payload = await self.llm_client.complete_json(COMPATIBILITY_SYSTEM_PROMPT, prompt)
            return self._result_from_payload(payload)
        except LLMError as exc:
            logger.warning("Compatibility analysis failed for %r at %r: %s", posting.title, posting.company, exc)
            return CompatibilityResult.failed()

    def build_compatibility_prompt(self, profile: ResumeAnalysis, posting: RawJobPosting) -> str:
        return COMPATIBILITY_PROMPT.format(
            skills=", ".join(profile.skills) or "None",
            experience=_format_years(profile.experience),
            title=posting.title,
            company=posting.company,
            requirements=", ".join(posting.requirements),
            description=posting.description[: self.description_chars],
        )

    def _result_from_payload(self, payload: dict[str, Any]) -> CompatibilityResult:
        try:
            score = float(payload.get("score", 0) or 0)
        except (TypeError, ValueError) as exc:
            raise LLMError(f"Non-numeric score: {payload.get('score')!r}") from exc
        if not math.isfinite(score):
            raise LLMError(f"Non-finite score: {payload.get('score')!r}")
        return CompatibilityResult(
            score=max(0.0, min(100.0, score)),
            matching_skills=_string_list(payload.get("matchingSkills")),
            missing_skills=_string_list(payload.get("missingSkills")),
            reasoning=str(payload.get("reasoning") or ""),
        )


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def _format_years(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)

from __future__ import annotations

import logging

from pydantic import ValidationError

from lockin.schemas.resume import ResumeAnalysis
from lockin.services.errors import LLMError
from lockin.services.llm_client import LLMClient

logger = logging.getLogger(__name__)

ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert resume reviewer. Always answer with one valid JSON object and nothing else."
)

ANALYSIS_PROMPT = """Analyze the following resume and extract a structured profile.

Resume:
{resume_text}

Respond with JSON in exactly this shape:
{{
  "skills": ["skill1", "skill2"],
  "experience": <total years of professional experience as a number>,
  "education": [{{"degree": "...", "institution": "...", "year": <graduation year or null>}}],
  "summary": "<two or three sentence professional summary>",
  "strengths": ["..."],
  "improvements": ["..."],
  "keywords": ["..."]
}}"""


class ResumeAnalyzer:
    def __init__(self, llm_client: LLMClient, max_chars: int = 12000) -> None:
        self.llm_client = llm_client
        self.max_chars = max_chars

    async def analyze(self, raw_text: str) -> ResumeAnalysis:
        prompt = ANALYSIS_PROMPT.format(resume_text=(raw_text or "")[: self.max_chars])
        payload = await self.llm_client.complete_json(ANALYSIS_SYSTEM_PROMPT, prompt)
        try:
            analysis = ResumeAnalysis.model_validate(payload)
        except ValidationError as exc:
            raise LLMError(f"LLM returned an unusable resume analysis: {exc}") from exc

        logger.info("Resume analyzed: %d skills, %s years experience", len(analysis.skills), analysis.experience)
        return analysis

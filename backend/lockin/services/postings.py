from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class RawJobPosting:
    """One scraped listing, normalized; lives only for a single scrape invocation."""

    title: str
    company: str
    location: str
    description: str
    url: str
    source: str
    requirements: list[str] = field(default_factory=list)
    salary: str | None = None
    posted_date: str | None = None


@dataclass
class CompatibilityResult:
    score: float
    matching_skills: list[str] = field(default_factory=list)
    missing_skills: list[str] = field(default_factory=list)
    reasoning: str = ""

    @classmethod
    def failed(cls) -> "CompatibilityResult":
        return cls(score=0.0, matching_skills=[], missing_skills=[], reasoning="Analysis failed")

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "matchingSkills": list(self.matching_skills),
            "missingSkills": list(self.missing_skills),
            "reasoning": self.reasoning,
        }

from __future__ import annotations

from lockin.config import settings
from lockin.services.aggregator import JobAggregator
from lockin.services.llm_client import LLMClient
from lockin.services.matcher import JobMatcher
from lockin.services.recommender import RecommendationService
from lockin.services.resume_analyzer import ResumeAnalyzer
from lockin.services.resume_parser import ResumeParser
from lockin.services.sources import build_sources


llm_client = LLMClient.from_settings(settings)
matcher = JobMatcher(llm_client, description_chars=settings.description_prompt_chars)
aggregator = JobAggregator(build_sources(settings))
recommender = RecommendationService(aggregator, matcher, settings)
analyzer = ResumeAnalyzer(llm_client, max_chars=settings.resume_prompt_chars)
parser = ResumeParser()


def get_matcher() -> JobMatcher:
    return matcher


def get_aggregator() -> JobAggregator:
    return aggregator


def get_recommender() -> RecommendationService:
    return recommender


def get_analyzer() -> ResumeAnalyzer:
    return analyzer


def get_parser() -> ResumeParser:
    return parser

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod

import httpx

from lockin.config import Settings
from lockin.services.normalize import DEFAULT_LOCATION
from lockin.services.postings import RawJobPosting

logger = logging.getLogger(__name__)

USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0 Safari/537.36",
)

# Number of resume skills folded into a search query string.
QUERY_TERMS = 3


class JobSource(ABC):
    """One integration against an external job-listing origin.

    ``fetch`` never raises: any failure of the underlying ``_fetch`` is logged
    and reported as an empty result, so one broken source cannot take the
    others down with it.
    """

    name: str = ""
    default_location: str = DEFAULT_LOCATION

    def __init__(self, config: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.config = config
        self.transport = transport
        self.max_results = max(1, config.max_jobs_per_source)

    async def fetch(self, terms: list[str], location: str | None = None) -> list[RawJobPosting]:
        try:
            postings = await self._fetch(terms, location)
        except Exception as exc:
            logger.warning("Source %s failed: %s", self.name, exc)
            return []
        logger.info("Source %s returned %d postings", self.name, min(len(postings), self.max_results))
        return postings[: self.max_results]

    @abstractmethod
    async def _fetch(self, terms: list[str], location: str | None) -> list[RawJobPosting]:
        raise NotImplementedError

    def fallback_location(self, location: str | None) -> str:
        return (location or "").strip() or self.default_location

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.config.http_timeout_seconds,
            follow_redirects=True,
            transport=self.transport,
            headers={"User-Agent": random.choice(USER_AGENTS)},
        )

    @staticmethod
    def query_string(terms: list[str], joiner: str = " ") -> str:
        picked = [term.strip() for term in terms if term and term.strip()][:QUERY_TERMS]
        return joiner.join(picked)

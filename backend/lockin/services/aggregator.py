from __future__ import annotations

import asyncio
import logging

from lockin.services.postings import RawJobPosting
from lockin.services.sources import JobSource

logger = logging.getLogger(__name__)


class JobAggregator:
    def __init__(self, sources: list[JobSource]) -> None:
        self.sources = list(sources)

    async def collect(self, terms: list[str], location: str | None = None) -> list[RawJobPosting]:
        """Run every source concurrently and concatenate their postings in source order.

        A source that raises counts as zero results. Cross-source duplicates are kept.
        """
        if not self.sources:
            return []

        logger.info("Scraping %d sources for terms: %s", len(self.sources), ", ".join(terms))
        results = await asyncio.gather(
            *(source.fetch(terms, location) for source in self.sources),
            return_exceptions=True,
        )

        postings: list[RawJobPosting] = []
        for source, result in zip(self.sources, results):
            if isinstance(result, BaseException):
                logger.error("Source %s raised: %r", source.name, result)
                continue
            postings.extend(result)

        logger.info("Scraped %d postings", len(postings))
        return postings

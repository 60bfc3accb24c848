from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from lockin.models.job import Job
from lockin.services.aggregator import JobAggregator

logger = logging.getLogger(__name__)


async def scrape_and_store_jobs(
    db: Session,
    aggregator: JobAggregator,
    terms: list[str],
    location: str | None = None,
) -> int:
    """Persist scraped postings as Job rows; entry point for the daily scheduler.

    A posting is skipped when a job with the same title and company (case-insensitive)
    is already stored or appeared earlier in the same batch.
    """
    postings = await aggregator.collect(terms, location)
    seen: set[tuple[str, str]] = set()
    created = 0

    for posting in postings:
        key = (posting.title.lower(), posting.company.lower())
        if key in seen:
            continue
        seen.add(key)

        exists = (
            db.query(Job.id)
            .filter(func.lower(Job.title) == key[0], func.lower(Job.company) == key[1])
            .first()
        )
        if exists:
            continue

        db.add(
            Job(
                title=posting.title[:255],
                company=posting.company[:255],
                location=posting.location[:255],
                description=posting.description[:2000],
                skills=posting.requirements,
            )
        )
        created += 1

    db.commit()
    logger.info("Stored %d new jobs from %d scraped postings", created, len(postings))
    return created

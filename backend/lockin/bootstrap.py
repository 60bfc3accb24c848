from __future__ import annotations

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


def _has_match_uniqueness(conn) -> bool:
    inspector = inspect(conn)
    wanted = {"resume_id", "job_id"}
    for constraint in inspector.get_unique_constraints("matches"):
        if set(constraint["column_names"]) == wanted:
            return True
    for index in inspector.get_indexes("matches"):
        if index.get("unique") and set(index["column_names"]) == wanted:
            return True
    return False


def run_runtime_migrations(engine: Engine) -> None:
    """Backfill the (resume_id, job_id) unique index on match tables created without it."""
    with engine.begin() as conn:
        if _has_match_uniqueness(conn):
            return

        # Keep one row per pair before indexing.
        conn.execute(
            text(
                """
                DELETE FROM matches
                WHERE id NOT IN (
                    SELECT MIN(id) FROM matches GROUP BY resume_id, job_id
                )
                """
            )
        )
        conn.execute(text("CREATE UNIQUE INDEX IF NOT EXISTS uq_match_resume_job ON matches (resume_id, job_id)"))
        logger.info("Created unique index uq_match_resume_job")

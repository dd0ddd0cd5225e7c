"""
Answer cache maintenance.

Prunes cached answers that are old and rarely used. Meant to be run
periodically from a scheduler:

    python -m docqa.application.services.cache_maintenance

Dependencies: docqa.core.rag_query, docqa.boundary.db
System role: Scheduled cache retention
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docqa.boundary.db.connection import get_async_session_factory
from docqa.configs import RetrievalSettings
from docqa.core.rag_query.answer_cache import AnswerCache

logger = logging.getLogger(__name__)


async def prune_answer_cache(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    settings: RetrievalSettings | None = None,
    max_age_days: int | None = None,
    min_hit_count: int | None = None,
) -> int:
    """
    Delete cache entries older than the retention horizon with too few hits.

    Args:
        session_factory: Session factory (application default if None)
        settings: Retrieval settings (defaults from environment)
        max_age_days: Overrides the configured retention horizon
        min_hit_count: Overrides the configured minimum hit count

    Returns:
        int: Number of deleted entries
    """
    session_factory = session_factory or get_async_session_factory()
    async with session_factory() as session:
        deleted = await AnswerCache(session, settings=settings).prune(
            max_age_days=max_age_days,
            min_hit_count=min_hit_count,
        )
    logger.info(f"{__name__}:prune_answer_cache - Pruned {deleted} cache entries")
    return deleted


if __name__ == "__main__":
    from docqa.observability.logger import configure_logging

    configure_logging()
    asyncio.run(prune_answer_cache())

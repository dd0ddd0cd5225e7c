"""
Hybrid ranker.

Runs semantic and keyword lookups concurrently, each on its own session
and under its own timeout, then fuses them with fuse_scores. A failed
half degrades the search to the other half; only a double failure is
an error.

Dependencies: asyncio, sqlalchemy, docqa.boundary.vdb, docqa.configs
System role: Query-time passage ranking
"""

import asyncio
import logging
from typing import Awaitable, Callable, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docqa.boundary.vdb.chunk_store import ChunkStore, chunk_store_scope
from docqa.boundary.vdb.vector_schemas import RankedPassage, ScoredChunk
from docqa.configs import RetrievalSettings, get_settings
from docqa.core.exceptions import RetrievalError
from docqa.core.retrieval.fusion import fuse_scores, validate_fusion_params

logger = logging.getLogger(__name__)

Lookup = Callable[[ChunkStore], Awaitable[list[ScoredChunk]]]


class HybridRanker:
    """Fuse semantic similarity and keyword relevance into one ranked list."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        settings: RetrievalSettings | None = None,
        **store_kwargs,
    ) -> None:
        """
        Args:
            session_factory: Factory used to open one session per lookup
            settings: Retrieval settings (defaults from environment)
            **store_kwargs: Forwarded to every ChunkStore
        """
        self._session_factory = session_factory
        self._settings = settings or get_settings().retrieval
        self._store_kwargs = store_kwargs

    async def search(
        self,
        question: str,
        question_vector: Sequence[float],
        document_ids: Sequence[UUID],
        semantic_weight: float | None = None,
        keyword_weight: float | None = None,
        limit: int | None = None,
    ) -> list[RankedPassage]:
        """
        Rank passages of `document_ids` for a question.

        Args:
            question: Raw question text, used for keyword matching
            question_vector: Question embedding, used for similarity
            document_ids: Search scope
            semantic_weight: Overrides the configured semantic weight
            keyword_weight: Overrides the configured keyword weight
            limit: Overrides the configured result limit

        Returns:
            list[RankedPassage]: Fused results, best first

        Raises:
            ValidationError: On invalid weights or limit
            RetrievalError: If both lookups fail
        """
        sw = self._settings.semantic_weight if semantic_weight is None else semantic_weight
        kw = self._settings.keyword_weight if keyword_weight is None else keyword_weight
        limit = self._settings.limit if limit is None else limit
        validate_fusion_params(sw, kw, limit)

        if not document_ids:
            return []

        semantic, keyword = await asyncio.gather(
            self._run_lookup(
                "semantic",
                lambda store: store.semantic_search(question_vector, document_ids),
            ),
            self._run_lookup(
                "keyword",
                lambda store: store.keyword_search(question, document_ids),
            ),
        )

        if semantic is None and keyword is None:
            raise RetrievalError(
                "Semantic and keyword search both failed",
                {"document_count": len(document_ids)},
            )

        ranked = fuse_scores(semantic or [], keyword or [], sw, kw, limit)
        logger.info(
            f"{__name__}:search - Ranked passages",
            extra={
                "semantic_count": -1 if semantic is None else len(semantic),
                "keyword_count": -1 if keyword is None else len(keyword),
                "result_count": len(ranked),
            },
        )
        return ranked

    async def _run_lookup(self, name: str, lookup: Lookup) -> list[ScoredChunk] | None:
        """Run one lookup on a dedicated session; None means it failed or timed out."""
        try:
            async with chunk_store_scope(self._session_factory, **self._store_kwargs) as store:
                return await asyncio.wait_for(lookup(store), timeout=self._settings.sub_search_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"{__name__}:_run_lookup - {name} search timed out",
                extra={"timeout": self._settings.sub_search_timeout},
            )
        except Exception as e:
            logger.warning(
                f"{__name__}:_run_lookup - {name} search failed",
                extra={"error_type": type(e).__name__, "error_msg": str(e)},
            )
        return None

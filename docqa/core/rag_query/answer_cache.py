"""
Semantic answer cache.

Answers are written under their exact (question, role) pair and read
back by embedding similarity: a new question reuses a cached answer when
its vector is close enough to a cached question's vector for the same
role. Writes key on text while reads key on similarity, so two
differently worded questions can each hold an entry and a lookup returns
whichever is closest.

Dependencies: sqlalchemy, numpy, docqa.boundary.db, docqa.configs
System role: Answer reuse across semantically equivalent questions
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Sequence

from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from docqa.boundary.db.base import utcnow
from docqa.boundary.db.CRUD.query_cache_crud import query_cache_crud
from docqa.boundary.db.models.document_model import Role
from docqa.boundary.db.models.query_cache_model import QueryCacheModel
from docqa.configs import RetrievalSettings, get_settings
from docqa.core.exceptions import ValidationError
from docqa.core.retrieval.similarity import cosine_similarities

logger = logging.getLogger(__name__)


class CacheHit(BaseModel):
    """Cached answer returned by a successful lookup."""

    id: uuid.UUID
    question: str
    answer: str
    sources: list[dict[str, Any]] = Field(default_factory=list)
    similarity: float
    hit_count: int


class AnswerCache:
    """Role-partitioned answer cache; every write is committed."""

    def __init__(self, session: AsyncSession, settings: RetrievalSettings | None = None) -> None:
        self.session = session
        self._settings = settings or get_settings().retrieval

    async def lookup(
        self,
        question_vector: Sequence[float],
        role: Role,
        similarity_threshold: float | None = None,
    ) -> CacheHit | None:
        """
        Find the closest cached question for `role`.

        The best entry is returned when its cosine similarity is at least
        the threshold (inclusive). A hit increments the entry's hit_count
        and refreshes last_hit_at.

        Args:
            question_vector: Embedding of the incoming question
            role: Caller role; entries of other roles are never considered
            similarity_threshold: Overrides the configured threshold

        Returns:
            CacheHit if an entry is close enough, None otherwise
        """
        threshold = (
            self._settings.cache_similarity_threshold
            if similarity_threshold is None
            else similarity_threshold
        )
        role = Role(role)

        entries = [
            entry
            for entry in await query_cache_crud.get_by_role(self.session, role)
            if len(entry.question_embedding) == len(question_vector)
        ]
        if not entries or not question_vector:
            return None

        similarities = cosine_similarities(question_vector, [e.question_embedding for e in entries])
        best = int(similarities.argmax())
        similarity = float(similarities[best])
        if similarity < threshold:
            logger.debug(
                f"{__name__}:lookup - Cache miss",
                extra={"role": role.value, "best_similarity": similarity},
            )
            return None

        try:
            entry = await query_cache_crud.record_hit(self.session, entries[best].id)
            await self.session.commit()
        except Exception as e:
            logger.error(f"{__name__}:lookup - {type(e).__name__}: {e}")
            await self.session.rollback()
            raise

        if entry is None:
            # Pruned between read and update
            return None

        logger.info(
            f"{__name__}:lookup - Cache hit",
            extra={"role": role.value, "similarity": similarity, "hit_count": entry.hit_count},
        )
        return CacheHit(
            id=entry.id,
            question=entry.question,
            answer=entry.answer,
            sources=entry.sources or [],
            similarity=similarity,
            hit_count=entry.hit_count,
        )

    async def save(
        self,
        question: str,
        question_vector: Sequence[float],
        answer: str,
        sources: list[dict[str, Any]],
        role: Role,
    ) -> QueryCacheModel:
        """
        Upsert the answer for an exact (question, role) pair.

        Args:
            question: Exact question text
            question_vector: Question embedding
            answer: Generated answer
            sources: Source references returned with the answer
            role: Caller role

        Returns:
            QueryCacheModel: Stored entry (hit_count 1 when new, incremented otherwise)

        Raises:
            ValidationError: If question, answer or vector is empty
        """
        if not question.strip():
            raise ValidationError("Question is required", field="question")
        if not answer.strip():
            raise ValidationError("Answer is required", field="answer")
        if not question_vector:
            raise ValidationError("Question embedding is required", field="question_vector")

        try:
            entry = await query_cache_crud.upsert(
                self.session,
                question=question,
                role=Role(role),
                question_embedding=[float(v) for v in question_vector],
                answer=answer,
                sources=sources,
            )
            await self.session.commit()
        except Exception as e:
            logger.error(f"{__name__}:save - {type(e).__name__}: {e}")
            await self.session.rollback()
            raise

        logger.info(
            f"{__name__}:save - Cached answer",
            extra={"role": Role(role).value, "hit_count": entry.hit_count},
        )
        return entry

    async def prune(
        self,
        max_age_days: int | None = None,
        min_hit_count: int | None = None,
        now: datetime | None = None,
    ) -> int:
        """
        Delete entries older than the horizon that were rarely used.

        An entry is removed when it was created more than `max_age_days`
        ago and its hit_count is below `min_hit_count`.

        Args:
            max_age_days: Overrides the configured retention horizon
            min_hit_count: Overrides the configured minimum hit count
            now: Reference time (defaults to the current UTC time)

        Returns:
            int: Number of deleted entries
        """
        days = self._settings.cache_retention_days if max_age_days is None else max_age_days
        min_hits = self._settings.cache_min_hits if min_hit_count is None else min_hit_count
        cutoff = (now or utcnow()) - timedelta(days=days)

        try:
            deleted = await query_cache_crud.delete_stale(self.session, cutoff, min_hits)
            await self.session.commit()
        except Exception as e:
            logger.error(f"{__name__}:prune - {type(e).__name__}: {e}")
            await self.session.rollback()
            raise

        logger.info(
            f"{__name__}:prune - Pruned cache",
            extra={"deleted": deleted, "max_age_days": days, "min_hit_count": min_hits},
        )
        return deleted

"""
Answer cache CRUD operations.

Role-scoped reads, hit accounting, the (question, role) upsert and the
retention delete for QueryCacheModel.

Dependencies: sqlalchemy, docqa.boundary.db.models
System role: Answer cache persistence operations
"""

import uuid
from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from docqa.boundary.db.base import utcnow
from docqa.boundary.db.models.document_model import Role
from docqa.boundary.db.models.query_cache_model import QueryCacheModel
from docqa.boundary.db.CRUD.base_crud import BaseCRUD

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class QueryCacheCRUD(BaseCRUD[QueryCacheModel]):
    """CRUD operations for QueryCacheModel."""

    def __init__(self) -> None:
        """Initialize QueryCacheCRUD with QueryCacheModel."""
        super().__init__(QueryCacheModel)

    async def get_by_role(self, session: AsyncSession, role: Role) -> Sequence[QueryCacheModel]:
        """Return every cache entry stored for `role`."""
        stmt = select(QueryCacheModel).where(QueryCacheModel.role == role)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def record_hit(self, session: AsyncSession, id: UUID) -> QueryCacheModel | None:
        """
        Increment an entry's hit_count and refresh last_hit_at.

        The increment is evaluated in SQL so concurrent hits are not lost.

        Args:
            session: Async database session
            id: Cache entry UUID

        Returns:
            Updated QueryCacheModel if found, None otherwise
        """
        return await self.update_by_id(
            session,
            id,
            hit_count=QueryCacheModel.hit_count + 1,
            last_hit_at=utcnow(),
        )

    async def upsert(
        self,
        session: AsyncSession,
        question: str,
        role: Role,
        question_embedding: list[float],
        answer: str,
        sources: list[dict[str, Any]],
    ) -> QueryCacheModel:
        """
        Insert an entry or, on a (question, role) conflict, refresh it.

        A fresh row starts with hit_count 1. A conflicting row gets the new
        answer, embedding and sources, and its hit_count is incremented.

        Args:
            session: Async database session
            question: Exact question text
            role: Caller role
            question_embedding: Question vector
            answer: Generated answer
            sources: Source references

        Returns:
            QueryCacheModel: The inserted or updated entry

        Raises:
            NotImplementedError: If the bound dialect has no ON CONFLICT support
        """
        dialect = session.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Cache upsert is not supported on {dialect}")

        now = utcnow()
        stmt = insert(QueryCacheModel).values(
            id=uuid.uuid4(),
            question=question,
            role=role,
            question_embedding=question_embedding,
            answer=answer,
            sources=sources,
            hit_count=1,
            last_hit_at=now,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[QueryCacheModel.question, QueryCacheModel.role],
            set_={
                "answer": stmt.excluded.answer,
                "question_embedding": stmt.excluded.question_embedding,
                "sources": stmt.excluded.sources,
                "hit_count": QueryCacheModel.hit_count + 1,
                "last_hit_at": now,
                "updated_at": now,
            },
        ).returning(QueryCacheModel)

        result = await session.execute(stmt, execution_options={"populate_existing": True})
        return result.scalar_one()

    async def delete_stale(self, session: AsyncSession, created_before: datetime, min_hit_count: int) -> int:
        """
        Delete entries created before `created_before` with fewer than `min_hit_count` hits.

        Args:
            session: Async database session
            created_before: Age horizon
            min_hit_count: Entries with at least this many hits survive

        Returns:
            int: Number of deleted entries
        """
        stmt = delete(QueryCacheModel).where(
            QueryCacheModel.created_at < created_before,
            QueryCacheModel.hit_count < min_hit_count,
        )
        result = await session.execute(stmt, execution_options={"synchronize_session": False})
        return result.rowcount


query_cache_crud = QueryCacheCRUD()

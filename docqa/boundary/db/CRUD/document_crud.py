"""
Document CRUD operations.

Provides Create, Read, Update, Delete operations for DocumentModel
with document-specific query methods for status tracking and role visibility.

Dependencies: sqlalchemy, docqa.boundary.db.models
System role: Document persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from docqa.boundary.db.models.chunk_model import ChunkModel, EmbeddingModel
from docqa.boundary.db.models.document_model import DocumentModel, DocumentStatus, Role
from docqa.boundary.db.CRUD.base_crud import BaseCRUD


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """
    CRUD operations for DocumentModel.

    Extends BaseCRUD with document-specific queries for filtering
    by processing status and caller role.
    """

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def get_by_status(
        self,
        session: AsyncSession,
        status: DocumentStatus,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve documents by processing status, newest first.

        Args:
            session: Async database session
            status: Document processing status to filter by
            limit: Maximum number of documents to return
            offset: Number of documents to skip

        Returns:
            Sequence of DocumentModels with matching status
        """
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.status == status)
            .order_by(DocumentModel.created_at.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_searchable_ids(self, session: AsyncSession, role: Role) -> list[UUID]:
        """
        Return ids of completed documents visible to `role`.

        Visibility is evaluated through DocumentModel.is_visible_to so the
        membership rule lives in one place.

        Args:
            session: Async database session
            role: Caller role

        Returns:
            list[UUID]: Searchable document ids
        """
        documents = await self.get_by_status(session, DocumentStatus.COMPLETED)
        return [document.id for document in documents if document.is_visible_to(role)]

    async def update_status(
        self,
        session: AsyncSession,
        id: UUID,
        status: DocumentStatus,
        error_message: str | None = None,
    ) -> DocumentModel | None:
        """
        Write a document's processing status.

        Only FAILED keeps an error message; every other status clears it.
        Callers validate the transition first.

        Args:
            session: Async database session
            id: Document UUID
            status: New processing status
            error_message: Error details if status is FAILED

        Returns:
            Updated DocumentModel if found, None otherwise
        """
        update_fields = {
            "status": status,
            "error_message": error_message if status == DocumentStatus.FAILED else None,
        }
        return await self.update_by_id(session, id, **update_fields)

    async def claim_for_ingestion(
        self,
        session: AsyncSession,
        id: UUID,
        now: datetime,
        stale_before: datetime,
    ) -> bool:
        """
        Mark a document as held by an ingestion run.

        The claim is taken in a single conditional UPDATE, so of two
        workers racing for the same document only one succeeds. A claim
        older than `stale_before` is considered abandoned and taken over.

        Args:
            session: Async database session
            id: Document UUID
            now: Claim timestamp
            stale_before: Claims older than this are ignored

        Returns:
            True if the claim was taken, False if the document is missing
            or held by another run
        """
        stmt = (
            update(DocumentModel)
            .where(
                DocumentModel.id == id,
                or_(
                    DocumentModel.ingestion_claimed_at.is_(None),
                    DocumentModel.ingestion_claimed_at < stale_before,
                ),
            )
            .values(ingestion_claimed_at=now)
            .returning(DocumentModel.id)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def release_ingestion_claim(self, session: AsyncSession, id: UUID) -> None:
        """Clear a document's ingestion claim."""
        stmt = (
            update(DocumentModel)
            .where(DocumentModel.id == id)
            .values(ingestion_claimed_at=None)
            .execution_options(synchronize_session=False)
        )
        await session.execute(stmt)

    async def delete_with_contents(self, session: AsyncSession, id: UUID) -> bool:
        """
        Delete a document together with its chunks and embeddings.

        Children are deleted explicitly so the cascade holds on backends
        that do not enforce ON DELETE CASCADE.

        Args:
            session: Async database session
            id: Document UUID

        Returns:
            True if the document was deleted, False if not found
        """
        chunk_ids = select(ChunkModel.id).where(ChunkModel.document_id == id)
        await session.execute(delete(EmbeddingModel).where(EmbeddingModel.chunk_id.in_(chunk_ids)))
        await session.execute(delete(ChunkModel).where(ChunkModel.document_id == id))
        return await self.delete_by_id(session, id)


document_crud = DocumentCRUD()

"""
Chunk and embedding CRUD operations.

Batch chunk creation, embedding replacement and the scoped reads used
by semantic search, keyword search and passage hydration.

Dependencies: sqlalchemy, docqa.boundary.db.models
System role: Passage and vector persistence operations
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Row, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from docqa.boundary.db.models.chunk_model import ChunkModel, EmbeddingModel
from docqa.boundary.db.models.document_model import DocumentModel
from docqa.boundary.db.CRUD.base_crud import BaseCRUD


class ChunkCRUD(BaseCRUD[ChunkModel]):
    """CRUD operations for ChunkModel."""

    def __init__(self) -> None:
        """Initialize ChunkCRUD with ChunkModel."""
        super().__init__(ChunkModel)

    async def create_batch(
        self,
        session: AsyncSession,
        document_id: UUID,
        contents: Sequence[str],
        metadata: Sequence[dict[str, Any] | None] | None = None,
    ) -> list[ChunkModel]:
        """
        Insert all chunks of a document in one flush.

        chunk_index follows the order of `contents`, starting at 0.

        Args:
            session: Async database session
            document_id: Owning document
            contents: Chunk texts in document order
            metadata: Optional per-chunk metadata, aligned with contents

        Returns:
            list[ChunkModel]: Created chunks in index order
        """
        metadata = metadata or [None] * len(contents)
        chunks = [
            ChunkModel(
                document_id=document_id,
                content=content,
                chunk_index=index,
                chunk_metadata=meta,
            )
            for index, (content, meta) in enumerate(zip(contents, metadata))
        ]
        session.add_all(chunks)
        await session.flush()
        return chunks

    async def get_by_document(self, session: AsyncSession, document_id: UUID) -> Sequence[ChunkModel]:
        """Return a document's chunks ordered by chunk_index."""
        stmt = (
            select(ChunkModel)
            .where(ChunkModel.document_id == document_id)
            .order_by(ChunkModel.chunk_index)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_by_document(self, session: AsyncSession, document_id: UUID) -> int:
        """Return the number of chunks stored for a document."""
        stmt = select(func.count()).select_from(ChunkModel).where(ChunkModel.document_id == document_id)
        result = await session.execute(stmt)
        return result.scalar_one()

    async def get_ids_missing_embedding(self, session: AsyncSession, document_id: UUID) -> list[UUID]:
        """
        Return ids of a document's chunks that have no embedding yet.

        Args:
            session: Async database session
            document_id: Document to inspect

        Returns:
            list[UUID]: Chunk ids ordered by chunk_index
        """
        stmt = (
            select(ChunkModel.id)
            .outerjoin(EmbeddingModel, EmbeddingModel.chunk_id == ChunkModel.id)
            .where(ChunkModel.document_id == document_id, EmbeddingModel.id.is_(None))
            .order_by(ChunkModel.chunk_index)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def get_vectors_for_documents(
        self,
        session: AsyncSession,
        document_ids: Sequence[UUID],
    ) -> Sequence[Row]:
        """
        Return (chunk_id, vector) rows for every embedded chunk in scope.

        Args:
            session: Async database session
            document_ids: Documents to search

        Returns:
            Sequence of rows with chunk_id and vector
        """
        stmt = (
            select(EmbeddingModel.chunk_id, EmbeddingModel.vector)
            .join(ChunkModel, ChunkModel.id == EmbeddingModel.chunk_id)
            .where(ChunkModel.document_id.in_(list(document_ids)))
        )
        result = await session.execute(stmt)
        return result.all()

    async def get_contents_for_documents(
        self,
        session: AsyncSession,
        document_ids: Sequence[UUID],
    ) -> Sequence[Row]:
        """Return (id, content) rows for every chunk in scope, in a stable order."""
        stmt = (
            select(ChunkModel.id, ChunkModel.content)
            .where(ChunkModel.document_id.in_(list(document_ids)))
            .order_by(ChunkModel.document_id, ChunkModel.chunk_index)
        )
        result = await session.execute(stmt)
        return result.all()

    async def get_passages(self, session: AsyncSession, chunk_ids: Sequence[UUID]) -> Sequence[Row]:
        """
        Return chunk content joined with its document's filename.

        Args:
            session: Async database session
            chunk_ids: Chunks to hydrate

        Returns:
            Sequence of rows with chunk_id, document_id, filename, content
        """
        if not chunk_ids:
            return []
        stmt = (
            select(
                ChunkModel.id.label("chunk_id"),
                ChunkModel.document_id,
                DocumentModel.filename,
                ChunkModel.content,
            )
            .join(DocumentModel, DocumentModel.id == ChunkModel.document_id)
            .where(ChunkModel.id.in_(list(chunk_ids)))
        )
        result = await session.execute(stmt)
        return result.all()


class EmbeddingCRUD(BaseCRUD[EmbeddingModel]):
    """CRUD operations for EmbeddingModel."""

    def __init__(self) -> None:
        """Initialize EmbeddingCRUD with EmbeddingModel."""
        super().__init__(EmbeddingModel)

    async def replace(self, session: AsyncSession, chunk_id: UUID, vector: list[float]) -> EmbeddingModel:
        """
        Store the embedding of a chunk, replacing any existing one.

        Args:
            session: Async database session
            chunk_id: Embedded chunk
            vector: Embedding values

        Returns:
            EmbeddingModel: The stored embedding
        """
        await session.execute(delete(EmbeddingModel).where(EmbeddingModel.chunk_id == chunk_id))
        return await self.create(session, chunk_id=chunk_id, vector=[float(v) for v in vector])


chunk_crud = ChunkCRUD()
embedding_crud = EmbeddingCRUD()

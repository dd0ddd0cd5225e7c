"""
Embedding generation task.

Requests embeddings for a document's unembedded chunks concurrently
(bounded by a semaphore) and persists each vector as soon as it
arrives, committing per chunk. The missing set is re-read from the
store after every pass, so a resumed run only embeds what is left.
The first failure cancels the outstanding requests.

Dependencies: asyncio, docqa.boundary.vdb, docqa.core.capabilities
System role: Third stage of document ingestion pipeline
"""

import asyncio
import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from docqa.boundary.db.models.chunk_model import ChunkModel
from docqa.boundary.vdb.chunk_store import ChunkStore
from docqa.core.capabilities import Embedder
from docqa.core.exceptions import DocQAException, DocumentProcessingError, EmbeddingUnavailable

logger = logging.getLogger(__name__)


class EmbeddingTask:
    """Embed and store every chunk of a document that lacks a vector."""

    def __init__(self, embedder: Embedder, concurrency: int = 5) -> None:
        """
        Args:
            embedder: Embedding capability
            concurrency: Maximum in-flight embedding requests

        Raises:
            ValueError: When concurrency is not positive
        """
        if concurrency <= 0:
            raise ValueError("concurrency must be positive")
        self._embedder = embedder
        self._concurrency = concurrency

    async def embed_missing(self, session: AsyncSession, store: ChunkStore, document_id: UUID) -> int:
        """
        Embed chunks until none of the document's chunks lacks a vector.

        Args:
            session: Session the store writes through; committed per embedding
            store: Chunk store bound to `session`
            document_id: Document being ingested

        Returns:
            int: Number of embeddings written by this call

        Raises:
            EmbeddingUnavailable: When any embedding request fails
            DocumentProcessingError: When a pass stores nothing
        """
        created = 0
        while True:
            missing = await store.chunks_missing_embedding(document_id)
            if not missing:
                return created

            chunks = await store.get_chunks(missing)
            stored = await self._embed_pass(session, store, chunks)
            if stored == 0:
                raise DocumentProcessingError("Embedding pass made no progress", document_id)
            created += stored

            logger.debug(
                f"{__name__}:embed_missing - Pass complete",
                extra={"document_id": str(document_id), "stored": stored, "total": created},
            )

    async def _embed_pass(self, session: AsyncSession, store: ChunkStore, chunks: Sequence[ChunkModel]) -> int:
        semaphore = asyncio.Semaphore(self._concurrency)
        tasks = [asyncio.create_task(self._embed_one(semaphore, chunk.id, chunk.content)) for chunk in chunks]
        stored = 0
        try:
            for next_done in asyncio.as_completed(tasks):
                chunk_id, vector = await next_done
                await store.put_embedding(chunk_id, vector)
                await session.commit()
                stored += 1
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
        return stored

    async def _embed_one(self, semaphore: asyncio.Semaphore, chunk_id: UUID, content: str) -> tuple[UUID, list[float]]:
        async with semaphore:
            try:
                vector = await self._embedder.embed(content)
            except DocQAException:
                raise
            except Exception as e:
                raise EmbeddingUnavailable(
                    f"Embedding request failed: {e}",
                    {"chunk_id": str(chunk_id)},
                ) from e
        return chunk_id, vector

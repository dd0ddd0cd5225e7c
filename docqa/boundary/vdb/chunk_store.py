"""
Chunk store adapter.

Persists chunks and embeddings and answers the two lookups hybrid search
needs: cosine similarity over stored vectors and lexical matching over
chunk text. Every lookup is scoped to caller-supplied document ids; the
store never decides visibility.

Dependencies: sqlalchemy, numpy, rank_bm25, docqa.boundary.db
System role: Vector/keyword store adapter for ingestion and retrieval
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docqa.boundary.db.CRUD.chunk_crud import chunk_crud, embedding_crud
from docqa.boundary.db.models.chunk_model import ChunkModel
from docqa.boundary.vdb.vector_schemas import Passage, RankedPassage, ScoredChunk
from docqa.configs import get_settings
from docqa.core.exceptions import ChunkNotFoundError, ValidationError
from docqa.core.retrieval.keyword_index import score_keyword_matches
from docqa.core.retrieval.similarity import cosine_similarities

logger = logging.getLogger(__name__)


class ChunkStore:
    """
    Chunk, embedding and lookup operations bound to one session.

    Writes flush but do not commit; the caller owns the transaction.

    Lookups are full scans of the scoped documents, not index queries:
    semantic_search loads every scoped vector and scores it with numpy,
    keyword_search loads every scoped chunk text and scores it with BM25+.
    Cost grows linearly with the chunks in scope; there is no pgvector
    or full-text index behind either lookup.
    """

    def __init__(
        self,
        session: AsyncSession,
        embedding_dimension: int | None = None,
        semantic_score_floor: float | None = None,
        keyword_rank_scale: float | None = None,
    ) -> None:
        """
        Args:
            session: Async database session
            embedding_dimension: Required vector length; 0 disables the check
            semantic_score_floor: Default floor for semantic_search
            keyword_rank_scale: Multiplier for normalised keyword relevance
        """
        settings = get_settings()
        self.session = session
        self.embedding_dimension = (
            settings.llm.embedding_dimension if embedding_dimension is None else embedding_dimension
        )
        self.semantic_score_floor = (
            settings.retrieval.semantic_score_floor if semantic_score_floor is None else semantic_score_floor
        )
        self.keyword_rank_scale = (
            settings.retrieval.keyword_rank_scale if keyword_rank_scale is None else keyword_rank_scale
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def put_chunks(
        self,
        document_id: UUID,
        contents: Sequence[str],
        metadata: Sequence[dict[str, Any] | None] | None = None,
    ) -> list[UUID]:
        """
        Persist all chunks of a document as one batch.

        Args:
            document_id: Owning document
            contents: Chunk texts in document order
            metadata: Optional per-chunk metadata

        Returns:
            list[UUID]: Chunk ids in chunk_index order

        Raises:
            ValidationError: If contents is empty or contains a blank chunk
        """
        if not contents:
            raise ValidationError("No chunks to store", field="contents")
        if any(not content.strip() for content in contents):
            raise ValidationError("Chunks must not be empty", field="contents")
        if metadata is not None and len(metadata) != len(contents):
            raise ValidationError("metadata must align with contents", field="metadata")

        chunks = await chunk_crud.create_batch(self.session, document_id, contents, metadata)
        logger.debug(
            f"{__name__}:put_chunks - Stored chunks",
            extra={"document_id": str(document_id), "chunk_count": len(chunks)},
        )
        return [chunk.id for chunk in chunks]

    async def put_embedding(self, chunk_id: UUID, vector: Sequence[float]) -> None:
        """
        Store a chunk's embedding, replacing any existing one.

        Args:
            chunk_id: Embedded chunk
            vector: Embedding values

        Raises:
            ValidationError: If the vector is empty or has the wrong dimension
            ChunkNotFoundError: If the chunk does not exist
        """
        if not vector:
            raise ValidationError("Embedding vector is empty", field="vector")
        if self.embedding_dimension and len(vector) != self.embedding_dimension:
            raise ValidationError(
                f"Embedding has dimension {len(vector)}, expected {self.embedding_dimension}",
                field="vector",
            )
        if not await chunk_crud.exists(self.session, chunk_id):
            raise ChunkNotFoundError(chunk_id)

        await embedding_crud.replace(self.session, chunk_id, list(vector))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def chunks_missing_embedding(self, document_id: UUID) -> list[UUID]:
        """Chunk ids of a document without an embedding, in chunk_index order."""
        return await chunk_crud.get_ids_missing_embedding(self.session, document_id)

    async def count_chunks(self, document_id: UUID) -> int:
        """Number of chunks stored for a document."""
        return await chunk_crud.count_by_document(self.session, document_id)

    async def get_chunks(self, chunk_ids: Sequence[UUID]) -> list[ChunkModel]:
        """
        Load chunks by id, preserving the order of `chunk_ids`.

        Ids with no stored chunk are skipped.
        """
        found = {chunk.id: chunk for chunk in await chunk_crud.get_by_ids(self.session, chunk_ids)}
        return [found[chunk_id] for chunk_id in chunk_ids if chunk_id in found]

    async def get_passages(self, ranked: Sequence[RankedPassage]) -> list[Passage]:
        """
        Hydrate ranked results with chunk text and document filename.

        Args:
            ranked: Fused results in rank order

        Returns:
            list[Passage]: Passages in the same order; vanished chunks are skipped
        """
        rows = await chunk_crud.get_passages(self.session, [item.chunk_id for item in ranked])
        by_id = {row.chunk_id: row for row in rows}
        passages = []
        for item in ranked:
            row = by_id.get(item.chunk_id)
            if row is None:
                continue
            passages.append(
                Passage(
                    chunk_id=row.chunk_id,
                    document_id=row.document_id,
                    filename=row.filename,
                    content=row.content,
                    relevance_score=item.combined_score,
                    search_type=item.search_type,
                )
            )
        return passages

    async def semantic_search(
        self,
        query_vector: Sequence[float],
        document_ids: Sequence[UUID],
        score_floor: float | None = None,
    ) -> list[ScoredChunk]:
        """
        Rank embedded chunks by cosine similarity to `query_vector`.

        Args:
            query_vector: Question embedding
            document_ids: Search scope
            score_floor: Results must score strictly above this value

        Returns:
            list[ScoredChunk]: Matches sorted by similarity descending
        """
        if not document_ids or not query_vector:
            return []
        floor = self.semantic_score_floor if score_floor is None else score_floor

        rows = await chunk_crud.get_vectors_for_documents(self.session, document_ids)
        rows = [row for row in rows if len(row.vector) == len(query_vector)]
        if not rows:
            return []

        scores = cosine_similarities(query_vector, [row.vector for row in rows])
        results = [
            ScoredChunk(chunk_id=row.chunk_id, score=float(score))
            for row, score in zip(rows, scores)
            if score > floor
        ]
        results.sort(key=lambda item: item.score, reverse=True)
        return results

    async def keyword_search(self, query_text: str, document_ids: Sequence[UUID]) -> list[ScoredChunk]:
        """
        Rank chunks containing every query term by lexical relevance.

        Args:
            query_text: Raw question text
            document_ids: Search scope

        Returns:
            list[ScoredChunk]: Matches sorted by relevance descending
        """
        if not document_ids or not query_text.strip():
            return []

        rows = await chunk_crud.get_contents_for_documents(self.session, document_ids)
        matches = score_keyword_matches(
            query_text,
            [(row.id, row.content) for row in rows],
            scale=self.keyword_rank_scale,
        )
        return [ScoredChunk(chunk_id=chunk_id, score=score) for chunk_id, score in matches]


@asynccontextmanager
async def chunk_store_scope(
    session_factory: async_sessionmaker[AsyncSession],
    **store_kwargs: Any,
) -> AsyncIterator[ChunkStore]:
    """
    Open a ChunkStore on its own session.

    Lets the two halves of a hybrid search run concurrently without
    sharing a session.

    Usage:
        async with chunk_store_scope(session_factory) as store:
            results = await store.semantic_search(vector, document_ids)
    """
    async with session_factory() as session:
        yield ChunkStore(session, **store_kwargs)

"""
Test suite for the chunk store adapter.

Runs against SQLite to verify chunk and embedding persistence and the
scoped semantic and keyword lookups.

System role: Verification of the vector/keyword store adapter
"""

import uuid

import pytest

from docqa.boundary.db.models.document_model import DocumentStatus
from docqa.boundary.vdb.chunk_store import ChunkStore, chunk_store_scope
from docqa.boundary.vdb.vector_schemas import RankedPassage, SearchType
from docqa.core.exceptions import ChunkNotFoundError, ValidationError


def _unit(index: int, dimension: int = 16) -> list[float]:
    vector = [0.0] * dimension
    vector[index] = 1.0
    return vector


@pytest.fixture
def store(test_async_db) -> ChunkStore:
    return ChunkStore(test_async_db, embedding_dimension=16, semantic_score_floor=0.2)


class TestPutChunks:
    """Test suite for ChunkStore.put_chunks()."""

    @pytest.mark.asyncio
    async def test_put_chunks_should_store_in_order(self, store, make_document) -> None:
        # Arrange
        document = await make_document()

        # Act
        ids = await store.put_chunks(document.id, ["first", "second", "third"])

        # Assert
        chunks = await store.get_chunks(ids)
        assert [chunk.content for chunk in chunks] == ["first", "second", "third"]
        assert [chunk.chunk_index for chunk in chunks] == [0, 1, 2]
        assert await store.count_chunks(document.id) == 3

    @pytest.mark.asyncio
    async def test_put_chunks_should_reject_empty_batch(self, store, make_document) -> None:
        document = await make_document()

        with pytest.raises(ValidationError):
            await store.put_chunks(document.id, [])

    @pytest.mark.asyncio
    async def test_put_chunks_should_reject_blank_chunk(self, store, make_document) -> None:
        document = await make_document()

        with pytest.raises(ValidationError):
            await store.put_chunks(document.id, ["ok", "   "])

    @pytest.mark.asyncio
    async def test_put_chunks_should_store_metadata(self, store, make_document) -> None:
        document = await make_document()

        ids = await store.put_chunks(document.id, ["a", "b"], metadata=[{"page": 1}, None])

        chunks = await store.get_chunks(ids)
        assert chunks[0].chunk_metadata == {"page": 1}
        assert chunks[1].chunk_metadata is None


class TestPutEmbedding:
    """Test suite for ChunkStore.put_embedding()."""

    @pytest.mark.asyncio
    async def test_put_embedding_should_clear_missing_set(self, store, make_document) -> None:
        # Arrange
        document = await make_document()
        ids = await store.put_chunks(document.id, ["a", "b", "c"])

        # Act
        await store.put_embedding(ids[1], _unit(0))

        # Assert
        assert await store.chunks_missing_embedding(document.id) == [ids[0], ids[2]]

    @pytest.mark.asyncio
    async def test_put_embedding_should_replace_existing_vector(self, store, make_document) -> None:
        document = await make_document()
        ids = await store.put_chunks(document.id, ["a"])

        await store.put_embedding(ids[0], _unit(0))
        await store.put_embedding(ids[0], _unit(1))

        results = await store.semantic_search(_unit(1), [document.id])
        assert [item.chunk_id for item in results] == [ids[0]]
        assert results[0].score == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_put_embedding_should_reject_wrong_dimension(self, store, make_document) -> None:
        document = await make_document()
        ids = await store.put_chunks(document.id, ["a"])

        with pytest.raises(ValidationError):
            await store.put_embedding(ids[0], [1.0, 0.0])

    @pytest.mark.asyncio
    async def test_put_embedding_should_reject_empty_vector(self, store, make_document) -> None:
        document = await make_document()
        ids = await store.put_chunks(document.id, ["a"])

        with pytest.raises(ValidationError):
            await store.put_embedding(ids[0], [])

    @pytest.mark.asyncio
    async def test_put_embedding_should_raise_for_unknown_chunk(self, store) -> None:
        with pytest.raises(ChunkNotFoundError):
            await store.put_embedding(uuid.uuid4(), _unit(0))


class TestSemanticSearch:
    """Test suite for ChunkStore.semantic_search()."""

    @pytest.mark.asyncio
    async def test_semantic_search_should_respect_scope_and_floor(self, store, make_document) -> None:
        # Arrange
        in_scope = await make_document("in.txt")
        out_of_scope = await make_document("out.txt")
        close, far = await store.put_chunks(in_scope.id, ["close", "far"])
        (other,) = await store.put_chunks(out_of_scope.id, ["other"])
        await store.put_embedding(close, [1.0, 0.1] + [0.0] * 14)
        await store.put_embedding(far, _unit(5))
        await store.put_embedding(other, _unit(0))

        # Act
        results = await store.semantic_search(_unit(0), [in_scope.id])

        # Assert
        assert [item.chunk_id for item in results] == [close]
        assert results[0].score > 0.2

    @pytest.mark.asyncio
    async def test_semantic_search_should_sort_by_score(self, store, make_document) -> None:
        document = await make_document()
        ids = await store.put_chunks(document.id, ["a", "b"])
        await store.put_embedding(ids[0], [0.6, 0.8] + [0.0] * 14)
        await store.put_embedding(ids[1], [0.9, 0.1] + [0.0] * 14)

        results = await store.semantic_search(_unit(0), [document.id])

        assert [item.chunk_id for item in results] == [ids[1], ids[0]]

    @pytest.mark.asyncio
    async def test_semantic_search_should_score_every_scoped_vector(self, store, make_document) -> None:
        # Arrange
        document = await make_document()
        ids = await store.put_chunks(document.id, [f"passage {i}" for i in range(30)])
        for i, chunk_id in enumerate(ids):
            await store.put_embedding(chunk_id, [1.0, i / 100] + [0.0] * 14)

        # Act
        results = await store.semantic_search(_unit(0), [document.id])

        # Assert
        assert len(results) == 30
        assert results[0].chunk_id == ids[0]
        assert results[-1].chunk_id == ids[-1]

    @pytest.mark.asyncio
    async def test_semantic_search_with_empty_scope_should_return_empty(self, store) -> None:
        assert await store.semantic_search(_unit(0), []) == []


class TestKeywordSearch:
    """Test suite for ChunkStore.keyword_search()."""

    @pytest.mark.asyncio
    async def test_keyword_search_should_respect_scope(self, store, make_document) -> None:
        # Arrange
        in_scope = await make_document("in.txt")
        out_of_scope = await make_document("out.txt")
        (match,) = await store.put_chunks(in_scope.id, ["Our refund policy lasts 30 days."])
        await store.put_chunks(out_of_scope.id, ["Another refund policy."])

        # Act
        results = await store.keyword_search("refund policy", [in_scope.id])

        # Assert
        assert [item.chunk_id for item in results] == [match]
        assert 0.0 < results[0].score <= 1.0

    @pytest.mark.asyncio
    async def test_keyword_search_with_blank_query_should_return_empty(self, store, make_document) -> None:
        document = await make_document()
        await store.put_chunks(document.id, ["text"])

        assert await store.keyword_search("   ", [document.id]) == []


class TestGetPassages:
    """Test suite for ChunkStore.get_passages()."""

    @pytest.mark.asyncio
    async def test_get_passages_should_keep_rank_order(self, store, make_document) -> None:
        # Arrange
        document = await make_document("handbook.txt")
        first, second = await store.put_chunks(document.id, ["alpha", "beta"])
        ranked = [
            RankedPassage(chunk_id=second, semantic_score=0.9, keyword_score=0.0, combined_score=0.54,
                          search_type=SearchType.SEMANTIC),
            RankedPassage(chunk_id=uuid.uuid4(), semantic_score=0.5, keyword_score=0.0, combined_score=0.3,
                          search_type=SearchType.SEMANTIC),
            RankedPassage(chunk_id=first, semantic_score=0.0, keyword_score=0.5, combined_score=0.2,
                          search_type=SearchType.KEYWORD),
        ]

        # Act
        passages = await store.get_passages(ranked)

        # Assert
        assert [p.content for p in passages] == ["beta", "alpha"]
        assert passages[0].filename == "handbook.txt"
        assert passages[0].relevance_score == pytest.approx(0.54)
        assert passages[1].search_type == SearchType.KEYWORD


class TestChunkStoreScope:
    """Test suite for chunk_store_scope()."""

    @pytest.mark.asyncio
    async def test_scope_should_see_committed_chunks(self, session_factory, test_async_db, make_document) -> None:
        # Arrange
        document = await make_document(status=DocumentStatus.CHUNKS_CREATED)
        await ChunkStore(test_async_db).put_chunks(document.id, ["shared text"])
        await test_async_db.commit()

        # Act
        async with chunk_store_scope(session_factory) as scoped:
            count = await scoped.count_chunks(document.id)

        # Assert
        assert count == 1

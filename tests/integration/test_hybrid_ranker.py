"""
Test suite for the hybrid ranker.

Verifies fusion over real lookups, scope handling and degradation when
one half of the search fails or times out.

System role: Verification of query-time passage ranking
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from docqa.boundary.db.models.document_model import DocumentStatus
from docqa.boundary.vdb.chunk_store import ChunkStore
from docqa.boundary.vdb.vector_schemas import SearchType
from docqa.configs import RetrievalSettings
from docqa.core.exceptions import RetrievalError, ValidationError
from docqa.core.retrieval.hybrid_ranker import HybridRanker

CONTENTS = [
    "Refund policy: returns are accepted within 30 days.",
    "Parking is free on weekends for all visitors.",
    "Gift cards never expire and can be reloaded.",
]


def _unit(index: int) -> list[float]:
    vector = [0.0] * 16
    vector[index] = 1.0
    return vector


@pytest.fixture
async def seeded(test_async_db, make_document):
    """Completed document with three chunks embedded along distinct axes."""
    document = await make_document("policies.txt", status=DocumentStatus.COMPLETED)
    store = ChunkStore(test_async_db)
    chunk_ids = await store.put_chunks(document.id, CONTENTS)
    for axis, chunk_id in enumerate(chunk_ids):
        await store.put_embedding(chunk_id, _unit(axis))
    await test_async_db.commit()
    return document, chunk_ids


@pytest.fixture
def ranker(session_factory) -> HybridRanker:
    return HybridRanker(session_factory, settings=RetrievalSettings(sub_search_timeout=0.5))


class TestHybridRankerSearch:
    """Test suite for HybridRanker.search()."""

    @pytest.mark.asyncio
    async def test_chunk_found_by_both_lookups_should_be_hybrid(self, ranker, seeded) -> None:
        # Arrange
        document, chunk_ids = seeded

        # Act
        ranked = await ranker.search("refund policy", _unit(0), [document.id])

        # Assert
        assert [item.chunk_id for item in ranked] == [chunk_ids[0]]
        assert ranked[0].search_type == SearchType.HYBRID
        assert ranked[0].combined_score == pytest.approx(0.6 * 1.0 + 0.4 * ranked[0].keyword_score)

    @pytest.mark.asyncio
    async def test_single_source_results_should_be_fused_and_sorted(self, ranker, seeded) -> None:
        document, chunk_ids = seeded

        ranked = await ranker.search("parking", _unit(0), [document.id])

        assert [item.chunk_id for item in ranked] == [chunk_ids[0], chunk_ids[1]]
        assert ranked[0].search_type == SearchType.SEMANTIC
        assert ranked[1].search_type == SearchType.KEYWORD

    @pytest.mark.asyncio
    async def test_empty_scope_should_return_empty(self, ranker, seeded) -> None:
        assert await ranker.search("refund policy", _unit(0), []) == []

    @pytest.mark.asyncio
    async def test_limit_should_cap_results(self, ranker, seeded) -> None:
        document, _ = seeded

        ranked = await ranker.search("parking", _unit(0), [document.id], limit=1)

        assert len(ranked) == 1

    @pytest.mark.asyncio
    async def test_invalid_weights_should_raise(self, ranker, seeded) -> None:
        document, _ = seeded

        with pytest.raises(ValidationError):
            await ranker.search("refund", _unit(0), [document.id], semantic_weight=-1.0)


class TestHybridRankerDegradation:
    """Test suite for partial failures."""

    @pytest.mark.asyncio
    async def test_keyword_failure_should_degrade_to_semantic(self, ranker, seeded) -> None:
        # Arrange
        document, chunk_ids = seeded

        # Act
        with patch.object(ChunkStore, "keyword_search", AsyncMock(side_effect=RuntimeError("index offline"))):
            ranked = await ranker.search("refund policy", _unit(0), [document.id])

        # Assert
        assert [item.chunk_id for item in ranked] == [chunk_ids[0]]
        assert ranked[0].search_type == SearchType.SEMANTIC
        assert ranked[0].combined_score == pytest.approx(0.6)

    @pytest.mark.asyncio
    async def test_semantic_timeout_should_degrade_to_keyword(self, ranker, seeded) -> None:
        document, chunk_ids = seeded

        async def slow_search(*args, **kwargs):
            await asyncio.sleep(5)
            return []

        with patch.object(ChunkStore, "semantic_search", slow_search):
            ranked = await ranker.search("refund policy", _unit(0), [document.id])

        assert [item.chunk_id for item in ranked] == [chunk_ids[0]]
        assert ranked[0].search_type == SearchType.KEYWORD

    @pytest.mark.asyncio
    async def test_both_failures_should_raise(self, ranker, seeded) -> None:
        document, _ = seeded
        failure = AsyncMock(side_effect=RuntimeError("database offline"))

        with patch.object(ChunkStore, "keyword_search", failure), patch.object(ChunkStore, "semantic_search", failure):
            with pytest.raises(RetrievalError):
                await ranker.search("refund policy", _unit(0), [document.id])

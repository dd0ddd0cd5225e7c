"""
Test suite for QueryService.

Uses real ingestion and retrieval over SQLite with a deterministic
embedder and a mocked answer generator.

System role: Verification of question answering orchestration
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from docqa.application.services.document_service import DocumentService
from docqa.application.services.query_service import QueryService
from docqa.boundary.db.CRUD.query_cache_crud import query_cache_crud
from docqa.boundary.db.models.document_model import Role
from docqa.configs import RetrievalSettings
from docqa.core.exceptions import GenerationUnavailable, NoAccessibleDocumentsError, ValidationError
from docqa.core.rag_query.answer_cache import AnswerCache
from docqa.core.rag_query.answer_generator import INSUFFICIENT_INFORMATION
from docqa.core.retrieval.hybrid_ranker import HybridRanker

POLICY_TEXT = (
    "Refund policy: refunds are accepted within thirty days with a receipt. "
    "Store credit is offered after thirty days. " * 3
)
QUESTION = "What is the refund policy?"


@pytest.fixture
def query_service(test_async_db, session_factory, embedder, mock_generator) -> QueryService:
    return QueryService(
        db=test_async_db,
        session_factory=session_factory,
        embedder=embedder,
        generator=mock_generator,
    )


@pytest.fixture
async def employee_document(test_async_db, embedder):
    document, _ = await DocumentService(test_async_db, embedder=embedder).ingest_text(
        "refunds.txt", POLICY_TEXT, visible_to=[Role.EMPLOYEE]
    )
    return document


class TestAnswerQuestion:
    """Test suite for QueryService.answer_question()."""

    @pytest.mark.asyncio
    async def test_answer_should_include_sources(self, query_service, employee_document, mock_generator) -> None:
        # Act
        result = await query_service.answer_question(QUESTION, Role.EMPLOYEE)

        # Assert
        assert result.answer == "Refunds are accepted within 30 days of purchase."
        assert result.answered
        assert not result.cached
        assert result.sources
        assert result.sources[0].document_id == employee_document.id
        assert result.sources[0].filename == "refunds.txt"
        assert len(result.sources[0].chunk_content) <= 200
        mock_generator.answer.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_repeated_question_should_be_served_from_cache(
        self, query_service, employee_document, mock_generator, test_async_db
    ) -> None:
        # Arrange
        first = await query_service.answer_question(QUESTION, Role.EMPLOYEE)

        # Act
        second = await query_service.answer_question(QUESTION, Role.EMPLOYEE)

        # Assert
        assert second.cached
        assert second.answer == first.answer
        assert second.sources == first.sources
        mock_generator.answer.assert_awaited_once()
        entries = await query_cache_crud.get_by_role(test_async_db, Role.EMPLOYEE)
        assert len(entries) == 1
        assert entries[0].hit_count == 2

    @pytest.mark.asyncio
    async def test_question_should_be_trimmed(self, query_service, employee_document, embedder) -> None:
        await query_service.answer_question(f"   {QUESTION}  ", Role.EMPLOYEE)

        assert embedder.calls[-1] == QUESTION

    @pytest.mark.asyncio
    @pytest.mark.parametrize("question", ["", "   ", "x" * 5001])
    async def test_invalid_question_should_raise_before_embedding(
        self, query_service, embedder, mock_generator, question
    ) -> None:
        with pytest.raises(ValidationError):
            await query_service.answer_question(question, Role.EMPLOYEE)

        assert embedder.calls == []
        mock_generator.answer.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_role_without_documents_should_raise(self, query_service, employee_document) -> None:
        with pytest.raises(NoAccessibleDocumentsError) as exc_info:
            await query_service.answer_question(QUESTION, Role.CUSTOMER)

        assert exc_info.value.message == "No documents available"

    @pytest.mark.asyncio
    async def test_owner_should_see_every_document(self, query_service, employee_document) -> None:
        result = await query_service.answer_question(QUESTION, Role.BUSINESS_OWNER)

        assert result.answered

    @pytest.mark.asyncio
    async def test_no_passages_should_return_insufficient_answer(
        self, query_service, employee_document, mock_generator, test_async_db
    ) -> None:
        # Arrange
        with patch.object(HybridRanker, "search", AsyncMock(return_value=[])):
            # Act
            result = await query_service.answer_question(QUESTION, Role.EMPLOYEE)

        # Assert
        assert result.answer == INSUFFICIENT_INFORMATION
        assert not result.answered
        assert result.sources == []
        mock_generator.answer.assert_not_awaited()
        assert await query_cache_crud.count(test_async_db) == 0

    @pytest.mark.asyncio
    async def test_insufficient_generated_answer_should_not_be_cached(
        self, query_service, employee_document, mock_generator, test_async_db
    ) -> None:
        mock_generator.answer.return_value = INSUFFICIENT_INFORMATION

        result = await query_service.answer_question(QUESTION, Role.EMPLOYEE)

        assert not result.answered
        assert await query_cache_crud.count(test_async_db) == 0

    @pytest.mark.asyncio
    async def test_cache_save_failure_should_not_fail_query(self, query_service, employee_document) -> None:
        with patch.object(AnswerCache, "save", AsyncMock(side_effect=RuntimeError("disk full"))):
            result = await query_service.answer_question(QUESTION, Role.EMPLOYEE)

        assert result.answered

    @pytest.mark.asyncio
    async def test_cache_lookup_failure_should_fall_back_to_retrieval(
        self, query_service, employee_document, mock_generator
    ) -> None:
        # Arrange
        failing_lookup = AsyncMock(side_effect=RuntimeError("cache table down"))

        # Act
        with patch.object(query_cache_crud, "get_by_role", failing_lookup):
            result = await query_service.answer_question(QUESTION, Role.EMPLOYEE)

        # Assert
        assert result.answered
        assert not result.cached
        assert result.sources
        failing_lookup.assert_awaited_once()
        mock_generator.answer.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_generation_deadline_should_raise(self, query_service, employee_document, mock_generator) -> None:
        async def slow_answer(question, passages):
            await asyncio.sleep(5)
            return "late"

        mock_generator.answer.side_effect = slow_answer

        with pytest.raises(GenerationUnavailable):
            await query_service.answer_question(QUESTION, Role.EMPLOYEE, timeout=0.1)

    @pytest.mark.asyncio
    async def test_disabled_cache_should_always_generate(
        self, test_async_db, session_factory, embedder, mock_generator, employee_document
    ) -> None:
        service = QueryService(
            db=test_async_db,
            session_factory=session_factory,
            embedder=embedder,
            generator=mock_generator,
            settings=RetrievalSettings(cache_enabled=False),
        )

        await service.answer_question(QUESTION, Role.EMPLOYEE)
        result = await service.answer_question(QUESTION, Role.EMPLOYEE)

        assert not result.cached
        assert mock_generator.answer.await_count == 2
        assert await query_cache_crud.count(test_async_db) == 0

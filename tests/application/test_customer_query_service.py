"""
Test suite for CustomerQueryService.

System role: Verification of the customer question and contact flow
"""

import uuid

import pytest

from docqa.application.services.customer_query_service import CustomerQueryService
from docqa.application.services.document_service import DocumentService
from docqa.application.services.query_service import QueryService
from docqa.boundary.db.models.customer_query_model import CustomerQueryStatus
from docqa.boundary.db.models.document_model import Role
from docqa.core.exceptions import CustomerQueryNotFoundError, ValidationError
from docqa.core.rag_query.answer_generator import INSUFFICIENT_INFORMATION

SHIPPING_TEXT = "Shipping policy: orders ship within two business days. Express shipping costs extra."


@pytest.fixture
def customer_service(test_async_db, session_factory, embedder, mock_generator) -> CustomerQueryService:
    query_service = QueryService(
        db=test_async_db,
        session_factory=session_factory,
        embedder=embedder,
        generator=mock_generator,
    )
    return CustomerQueryService(db=test_async_db, query_service=query_service)


class TestAsk:
    """Test suite for CustomerQueryService.ask()."""

    @pytest.mark.asyncio
    async def test_no_customer_documents_should_ask_for_contact(self, customer_service, mock_generator) -> None:
        response = await customer_service.ask("How long does shipping take?")

        assert response.needs_contact
        assert response.answer == INSUFFICIENT_INFORMATION
        mock_generator.answer.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_answered_question_should_not_need_contact(
        self, customer_service, test_async_db, embedder
    ) -> None:
        # Arrange
        await DocumentService(test_async_db, embedder=embedder).ingest_text(
            "shipping.txt", SHIPPING_TEXT, visible_to=[Role.CUSTOMER]
        )

        # Act
        response = await customer_service.ask("What is the shipping policy?")

        # Assert
        assert not response.needs_contact
        assert response.sources[0].filename == "shipping.txt"

    @pytest.mark.asyncio
    async def test_insufficient_answer_should_ask_for_contact(
        self, customer_service, test_async_db, embedder, mock_generator
    ) -> None:
        await DocumentService(test_async_db, embedder=embedder).ingest_text(
            "shipping.txt", SHIPPING_TEXT, visible_to=[Role.CUSTOMER]
        )
        mock_generator.answer.return_value = INSUFFICIENT_INFORMATION

        response = await customer_service.ask("What is the shipping policy?")

        assert response.needs_contact

    @pytest.mark.asyncio
    async def test_empty_question_should_raise(self, customer_service) -> None:
        with pytest.raises(ValidationError):
            await customer_service.ask("  ")


class TestCaptureAndManage:
    """Test suite for capture, list and status updates."""

    @pytest.mark.asyncio
    async def test_capture_should_store_pending_query(self, customer_service) -> None:
        query = await customer_service.capture(" Do you ship abroad? ", "Ada", "ada@example.com")

        assert query.status == CustomerQueryStatus.PENDING
        assert query.question == "Do you ship abroad?"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "question,name,email",
        [("", "Ada", "ada@example.com"), ("Question?", " ", "ada@example.com"), ("Question?", "Ada", "")],
    )
    async def test_capture_should_require_every_field(self, customer_service, question, name, email) -> None:
        with pytest.raises(ValidationError):
            await customer_service.capture(question, name, email)

    @pytest.mark.asyncio
    async def test_list_should_filter_by_status(self, customer_service) -> None:
        # Arrange
        first = await customer_service.capture("First?", "Ada", "ada@example.com")
        await customer_service.capture("Second?", "Bob", "bob@example.com")
        await customer_service.update_status(first.id, CustomerQueryStatus.RESPONDED)

        # Act
        pending = await customer_service.list_queries(status=CustomerQueryStatus.PENDING)
        everything = await customer_service.list_queries()

        # Assert
        assert [query.question for query in pending] == ["Second?"]
        assert len(everything) == 2

    @pytest.mark.asyncio
    async def test_update_status_should_persist(self, customer_service) -> None:
        query = await customer_service.capture("Question?", "Ada", "ada@example.com")

        updated = await customer_service.update_status(query.id, CustomerQueryStatus.ARCHIVED)

        assert updated.status == CustomerQueryStatus.ARCHIVED

    @pytest.mark.asyncio
    async def test_update_unknown_query_should_raise(self, customer_service) -> None:
        with pytest.raises(CustomerQueryNotFoundError):
            await customer_service.update_status(uuid.uuid4(), CustomerQueryStatus.ARCHIVED)

"""
Customer query service.

Answers customer questions from customer-visible documents and captures
contact details for questions that could not be answered.

Dependencies: docqa.application.services.query_service, docqa.boundary.db
System role: Customer-facing question flow
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from docqa.application.services.query_service import QueryService
from docqa.boundary.db.CRUD.customer_query_crud import customer_query_crud
from docqa.boundary.db.models.customer_query_model import CustomerQueryModel, CustomerQueryStatus
from docqa.boundary.db.models.document_model import Role
from docqa.core.exceptions import CustomerQueryNotFoundError, NoAccessibleDocumentsError, ValidationError
from docqa.core.rag_query.answer_generator import INSUFFICIENT_INFORMATION
from docqa.models.customer_query import CustomerAskResponse

logger = logging.getLogger(__name__)


class CustomerQueryService:
    """Customer question answering and contact capture."""

    def __init__(self, db: AsyncSession, query_service: QueryService) -> None:
        """
        Args:
            db: AsyncSession for captured queries
            query_service: Query service used to answer as the customer role
        """
        self.db = db
        self.query_service = query_service

    async def ask(self, question: str) -> CustomerAskResponse:
        """
        Answer a customer question.

        An unanswerable question (no customer-visible documents, no
        relevant passages, or an insufficient answer) comes back with
        needs_contact set so the caller can collect contact details.

        Raises:
            ValidationError: Invalid question
        """
        try:
            result = await self.query_service.answer_question(question, role=Role.CUSTOMER)
        except NoAccessibleDocumentsError:
            return CustomerAskResponse(answer=INSUFFICIENT_INFORMATION, sources=[], needs_contact=True)

        needs_contact = not result.answered or not result.sources
        return CustomerAskResponse(answer=result.answer, sources=result.sources, needs_contact=needs_contact)

    async def capture(self, question: str, customer_name: str, customer_email: str) -> CustomerQueryModel:
        """
        Store a pending customer query with contact details.

        Raises:
            ValidationError: Missing question, name or email
        """
        for field, value in (("question", question), ("customer_name", customer_name), ("customer_email", customer_email)):
            if not (value or "").strip():
                raise ValidationError(f"{field} is required", field=field)

        query = await customer_query_crud.create(
            self.db,
            question=question.strip(),
            customer_name=customer_name.strip(),
            customer_email=customer_email.strip(),
            status=CustomerQueryStatus.PENDING,
        )
        await self.db.commit()
        logger.info(f"{__name__}:capture - Customer query captured", extra={"query_id": str(query.id)})
        return query

    async def list_queries(
        self,
        status: CustomerQueryStatus | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[CustomerQueryModel]:
        """List captured queries, newest first."""
        return await customer_query_crud.get_by_status(self.db, status=status, limit=limit, offset=offset)

    async def update_status(self, query_id: UUID, status: CustomerQueryStatus) -> CustomerQueryModel:
        """
        Raises:
            CustomerQueryNotFoundError: Query does not exist
        """
        query = await customer_query_crud.update_by_id(self.db, query_id, status=CustomerQueryStatus(status))
        if query is None:
            await self.db.rollback()
            raise CustomerQueryNotFoundError(query_id)
        await self.db.commit()
        return query

"""
Customer query API endpoints.

Routes:
- POST /customer/ask - Answer a customer question
- POST /customer/contact - Capture contact details for an unanswered question
- GET /customer/queries - List captured queries
- PATCH /customer/queries/{id} - Update a captured query's status

Dependencies: docqa.application.services, docqa.models
System role: Customer-facing HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from docqa.api.deps import get_customer_query_service
from docqa.application.services.customer_query_service import CustomerQueryService
from docqa.boundary.db.models.customer_query_model import CustomerQueryStatus
from docqa.models.common import ListResponse
from docqa.models.customer_query import (
    CustomerAskRequest,
    CustomerAskResponse,
    CustomerContactRequest,
    CustomerQueryResponse,
    CustomerQueryStatusUpdate,
)

router = APIRouter(prefix="/customer", tags=["customer"])


@router.post("/ask", response_model=CustomerAskResponse)
async def ask(
    request: CustomerAskRequest,
    service: CustomerQueryService = Depends(get_customer_query_service),
) -> CustomerAskResponse:
    """Answer from customer-visible documents; needs_contact flags unanswered questions."""
    return await service.ask(request.question)


@router.post("/contact", response_model=CustomerQueryResponse, status_code=status.HTTP_201_CREATED)
async def capture_contact(
    request: CustomerContactRequest,
    service: CustomerQueryService = Depends(get_customer_query_service),
) -> CustomerQueryResponse:
    """Store a pending customer query with contact details."""
    query = await service.capture(request.question, request.customer_name, request.customer_email)
    return CustomerQueryResponse.model_validate(query)


@router.get("/queries", response_model=ListResponse[CustomerQueryResponse])
async def list_queries(
    status_filter: CustomerQueryStatus | None = Query(default=None, alias="status"),
    limit: int | None = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    service: CustomerQueryService = Depends(get_customer_query_service),
) -> ListResponse[CustomerQueryResponse]:
    """List captured customer queries, newest first."""
    queries = await service.list_queries(status=status_filter, limit=limit, offset=offset)
    items = [CustomerQueryResponse.model_validate(query) for query in queries]
    return ListResponse[CustomerQueryResponse](items=items, total=len(items))


@router.patch("/queries/{query_id}", response_model=CustomerQueryResponse)
async def update_query_status(
    query_id: UUID,
    update: CustomerQueryStatusUpdate,
    service: CustomerQueryService = Depends(get_customer_query_service),
) -> CustomerQueryResponse:
    """Change a captured query's status."""
    query = await service.update_status(query_id, update.status)
    return CustomerQueryResponse.model_validate(query)

"""
Query API endpoints.

Routes: POST /query

Dependencies: docqa.application.services, docqa.models
System role: Question answering HTTP API
"""

from fastapi import APIRouter, Depends

from docqa.api.deps import get_query_service
from docqa.application.services.query_service import QueryService
from docqa.models.query import QueryAnswer, QueryRequest

router = APIRouter(prefix="/query", tags=["query"])


@router.post("", response_model=QueryAnswer)
async def ask_question(
    request: QueryRequest,
    service: QueryService = Depends(get_query_service),
) -> QueryAnswer:
    """
    Answer a question from the documents visible to the caller's role.

    Raises:
        400: Empty or overlong question
        404: No documents available for the role
        502: Embedding, retrieval or generation unavailable
    """
    return await service.answer_question(request.question, role=request.role)

"""Service orchestrators."""

from .customer_query_service import CustomerQueryService
from .document_service import DocumentService
from .query_service import QueryService

__all__ = [
    "CustomerQueryService",
    "DocumentService",
    "QueryService",
]

"""
Core business logic module.

Contains domain business logic, exception hierarchy, and core components:
chunking and ingestion (document_processing), hybrid retrieval
(retrieval), the semantic answer cache and answer generation (rag_query).
"""

from docqa.core.exceptions import (
    DocQAException,
    ValidationError,
    NotFoundError,
    UpstreamUnavailable,
    DocumentProcessingError,
    RetrievalError,
)

__all__ = [
    "DocQAException",
    "ValidationError",
    "NotFoundError",
    "UpstreamUnavailable",
    "DocumentProcessingError",
    "RetrievalError",
]

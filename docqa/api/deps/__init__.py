"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_answer_generator,
    get_customer_query_service,
    get_document_service,
    get_embedder,
    get_query_service,
    get_service_cache,
    get_session_factory,
    get_settings_dependency,
)

__all__ = [
    "get_answer_generator",
    "get_customer_query_service",
    "get_document_service",
    "get_embedder",
    "get_query_service",
    "get_service_cache",
    "get_session_factory",
    "get_settings_dependency",
]

"""API routers."""

from .customer_queries import router as customer_queries_router
from .documents import router as documents_router
from .health import router as health_router
from .query import router as query_router

__all__ = [
    "customer_queries_router",
    "documents_router",
    "health_router",
    "query_router",
]

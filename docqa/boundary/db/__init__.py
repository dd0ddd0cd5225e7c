"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - DocumentModel, ChunkModel, EmbeddingModel, QueryCacheModel, CustomerQueryModel: Domain entities
  - DocumentStatus, Role, CustomerQueryStatus: Enum types
  - document_crud, chunk_crud, embedding_crud, query_cache_crud, customer_query_crud: CRUD singletons

Dependencies: sqlalchemy, docqa.configs
System role: Database adapter providing persistent storage for documents,
passages, embeddings, cached answers and customer follow-ups.
"""

from docqa.boundary.db.base import Base, TimestampMixin, UUIDMixin
from docqa.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from docqa.boundary.db.models import (
    ChunkModel,
    CustomerQueryModel,
    CustomerQueryStatus,
    DocumentModel,
    DocumentStatus,
    EmbeddingModel,
    QueryCacheModel,
    Role,
)
from docqa.boundary.db.CRUD import (
    BaseCRUD,
    chunk_crud,
    customer_query_crud,
    document_crud,
    embedding_crud,
    query_cache_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "DocumentModel",
    "DocumentStatus",
    "Role",
    "ChunkModel",
    "EmbeddingModel",
    "QueryCacheModel",
    "CustomerQueryModel",
    "CustomerQueryStatus",
    # CRUD
    "BaseCRUD",
    "document_crud",
    "chunk_crud",
    "embedding_crud",
    "query_cache_crud",
    "customer_query_crud",
]

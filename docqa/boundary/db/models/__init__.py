"""
Database models package.

Exports:
  - DocumentModel, DocumentStatus, Role: Document ORM model and enums
  - ChunkModel, EmbeddingModel: Passage and vector ORM models
  - QueryCacheModel: Answer cache ORM model
  - CustomerQueryModel, CustomerQueryStatus: Follow-up queue ORM model

Dependencies: sqlalchemy, docqa.boundary.db.base
System role: Database model definitions for domain entities
"""

from docqa.boundary.db.models.document_model import (
    DocumentModel,
    DocumentStatus,
    Role,
    normalize_visibility,
)
from docqa.boundary.db.models.chunk_model import ChunkModel, EmbeddingModel
from docqa.boundary.db.models.query_cache_model import QueryCacheModel
from docqa.boundary.db.models.customer_query_model import (
    CustomerQueryModel,
    CustomerQueryStatus,
)

__all__ = [
    "DocumentModel",
    "DocumentStatus",
    "Role",
    "normalize_visibility",
    "ChunkModel",
    "EmbeddingModel",
    "QueryCacheModel",
    "CustomerQueryModel",
    "CustomerQueryStatus",
]

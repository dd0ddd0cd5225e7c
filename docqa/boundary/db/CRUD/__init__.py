"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from docqa.boundary.db.CRUD import document_crud, chunk_crud

    document = await document_crud.get_by_id(db, document_id)
    missing = await chunk_crud.get_ids_missing_embedding(db, document_id)
"""

from docqa.boundary.db.CRUD.base_crud import BaseCRUD
from docqa.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from docqa.boundary.db.CRUD.chunk_crud import ChunkCRUD, EmbeddingCRUD, chunk_crud, embedding_crud
from docqa.boundary.db.CRUD.query_cache_crud import QueryCacheCRUD, query_cache_crud
from docqa.boundary.db.CRUD.customer_query_crud import CustomerQueryCRUD, customer_query_crud

__all__ = [
    "BaseCRUD",
    "DocumentCRUD",
    "document_crud",
    "ChunkCRUD",
    "chunk_crud",
    "EmbeddingCRUD",
    "embedding_crud",
    "QueryCacheCRUD",
    "query_cache_crud",
    "CustomerQueryCRUD",
    "customer_query_crud",
]

"""
Vector and keyword store boundary layer.

Provides the chunk store used by ingestion and retrieval, and the
result schemas it returns.

Dependencies: sqlalchemy, numpy, rank_bm25
System role: Store adapter for chunk, embedding and lexical lookups
"""

from docqa.boundary.vdb.chunk_store import ChunkStore, chunk_store_scope
from docqa.boundary.vdb.vector_schemas import Passage, RankedPassage, ScoredChunk, SearchType

__all__ = [
    "ChunkStore",
    "chunk_store_scope",
    "Passage",
    "RankedPassage",
    "ScoredChunk",
    "SearchType",
]

"""
Retrieval schemas.

Pydantic models passed between the chunk store, the hybrid ranker and
the query service.

Dependencies: pydantic
System role: Type definitions for retrieval results
"""

import enum
import uuid

from pydantic import BaseModel, Field


class SearchType(str, enum.Enum):
    """Which lookup produced a ranked passage."""

    HYBRID = "hybrid"
    SEMANTIC = "semantic"
    KEYWORD = "keyword"


class ScoredChunk(BaseModel):
    """Single result from a semantic or keyword lookup."""

    chunk_id: uuid.UUID = Field(description="Chunk identifier")
    score: float = Field(description="Lookup score in [0, 1]")


class RankedPassage(BaseModel):
    """Fused result from the hybrid ranker."""

    chunk_id: uuid.UUID = Field(description="Chunk identifier")
    semantic_score: float = Field(default=0.0, description="Semantic score, 0 when absent")
    keyword_score: float = Field(default=0.0, description="Keyword score, 0 when absent")
    combined_score: float = Field(description="Weighted combination used for ordering")
    search_type: SearchType = Field(description="Lookup(s) that produced this passage")


class Passage(BaseModel):
    """Ranked passage hydrated with its text and document."""

    chunk_id: uuid.UUID
    document_id: uuid.UUID
    filename: str
    content: str
    relevance_score: float
    search_type: SearchType

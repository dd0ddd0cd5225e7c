"""
Query API schemas.

Request/response schemas for question answering.

Dependencies: pydantic
System role: Query API contracts
"""

import uuid

from pydantic import BaseModel, Field

from docqa.boundary.db.models.document_model import Role
from docqa.boundary.vdb.vector_schemas import SearchType


class QueryRequest(BaseModel):
    """Question from an owner or employee."""

    question: str = Field(description="Question text (1-5000 characters after trimming)")
    role: Role = Field(default=Role.EMPLOYEE, description="Caller role")


class SourceReference(BaseModel):
    """Passage an answer was grounded on."""

    document_id: uuid.UUID
    filename: str
    chunk_content: str = Field(description="Leading snippet of the passage")
    relevance_score: float
    search_type: SearchType | None = None


class QueryAnswer(BaseModel):
    """Answer returned to the caller."""

    answer: str
    sources: list[SourceReference] = Field(default_factory=list)
    cached: bool = Field(default=False, description="Served from the answer cache")
    answered: bool = Field(default=True, description="False when the context was insufficient")

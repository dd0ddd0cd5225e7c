"""
Document API schemas.

Request/response schemas for document upload, listing, ingestion and stats.

Dependencies: pydantic
System role: Document API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from docqa.boundary.db.models.document_model import DocumentStatus, Role


class DocumentResponse(BaseModel):
    """Response schema for a document."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    filename: str
    file_size: int
    media_type: str
    status: DocumentStatus
    visible_to: list[Role]
    error_message: str | None = None
    created_at: datetime
    updated_at: datetime


class IngestTextRequest(BaseModel):
    """Request schema for ingesting already extracted text."""

    filename: str = Field(min_length=1, max_length=255)
    text: str = Field(min_length=1, description="Extracted document text")
    media_type: str = Field(default="text/plain")
    visible_to: list[Role] = Field(
        default_factory=list,
        description="Roles allowed to search the document (owner always included)",
    )


class IngestionResponse(BaseModel):
    """Outcome of an ingestion run."""

    document: DocumentResponse
    chunk_count: int
    embeddings_created: int
    processing_time_ms: float


class StatsResponse(BaseModel):
    """Knowledge base counters."""

    documents: int
    chunks: int
    cached_answers: int
    customer_queries: int

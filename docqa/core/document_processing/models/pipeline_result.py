"""
Pipeline result model for document ingestion.

Represents the outcome of running a document through the pipeline.

Dependencies: pydantic
System role: Return type for IngestionPipeline.run()
"""

import uuid

from pydantic import BaseModel, Field

from docqa.boundary.db.models.document_model import DocumentStatus


class PipelineResult(BaseModel):
    """Result of one ingestion run."""

    document_id: uuid.UUID = Field(description="Ingested document")
    status: DocumentStatus = Field(description="Document status after the run")
    chunk_count: int = Field(description="Chunks stored for the document")
    embeddings_created: int = Field(default=0, description="Embeddings written by this run")
    processing_time_ms: float = Field(description="Total processing time in milliseconds")
    skipped: bool = Field(default=False, description="True when the document was already completed")

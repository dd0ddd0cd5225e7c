"""
Document ingestion pipeline.

Chunking, status transitions and the orchestrator that extracts, chunks
and embeds documents.

Dependencies: sqlalchemy, langchain_google_genai, pydantic
System role: Document ingestion pipeline entrypoint
"""

from .chunker import chunk_text
from .ingestion_pipeline import IngestionPipeline
from .models import PipelineResult
from .status_machine import StatusEvent, transition

__all__ = [
    "IngestionPipeline",
    "PipelineResult",
    "StatusEvent",
    "chunk_text",
    "transition",
]

"""
Task modules for document ingestion pipeline.

Exports: PlainTextExtractor, ChunkingTask, EmbeddingTask
"""

from .chunking_task import ChunkingTask
from .embedding_task import EmbeddingTask
from .extraction_task import TEXT_MEDIA_TYPES, PlainTextExtractor

__all__ = [
    "PlainTextExtractor",
    "TEXT_MEDIA_TYPES",
    "ChunkingTask",
    "EmbeddingTask",
]

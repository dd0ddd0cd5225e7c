"""
Text chunking task.

Splits extracted text into overlapping passages with the configured
size and overlap.

Dependencies: docqa.core.document_processing.chunker
System role: Second stage of document ingestion pipeline
"""

from docqa.core.document_processing.chunker import chunk_text
from docqa.core.exceptions import ExtractionFailed


class ChunkingTask:
    """Split extracted text into chunks."""

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
    ) -> None:
        """
        Initialize chunking task with splitter configuration.

        Args:
            chunk_size: Maximum chunk size in characters
            chunk_overlap: Overlap budget; chunk_overlap // 5 words are repeated
        """
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    def chunk(self, text: str) -> list[str]:
        """
        Split text into chunks.

        Args:
            text: Extracted document text

        Returns:
            list[str]: Non-empty chunks in document order

        Raises:
            ExtractionFailed: When the text yields no chunks
        """
        chunks = chunk_text(text, self.chunk_size, self.chunk_overlap)
        if not chunks:
            raise ExtractionFailed("No text could be extracted from document")
        return chunks

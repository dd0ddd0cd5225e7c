"""
Plain text extraction task.

Decodes text-based uploads (plain text, CSV, Markdown). Binary formats
are handled by an external extractor plugged in through the
TextExtractor interface.

Dependencies: docqa.core.exceptions
System role: First stage of document ingestion pipeline
"""

from docqa.core.exceptions import ExtractionFailed, UnsupportedMediaType

TEXT_MEDIA_TYPES = frozenset({"text/plain", "text/csv", "text/markdown"})


class PlainTextExtractor:
    """Decode UTF-8 text documents."""

    def __init__(self, media_types: frozenset[str] = TEXT_MEDIA_TYPES) -> None:
        self._media_types = media_types

    def supports(self, media_type: str) -> bool:
        """Return True when this extractor handles `media_type`."""
        return media_type.split(";")[0].strip().lower() in self._media_types

    async def extract(self, raw: bytes, media_type: str) -> str:
        """
        Decode raw bytes into text.

        Args:
            raw: Uploaded document bytes
            media_type: Declared MIME type

        Returns:
            str: Decoded text (a leading BOM is dropped)

        Raises:
            UnsupportedMediaType: When media_type is not a text type
            ExtractionFailed: When the bytes are not UTF-8 or contain no text
        """
        if not self.supports(media_type):
            raise UnsupportedMediaType(media_type)

        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ExtractionFailed(f"Document is not valid UTF-8 ({e.reason})") from e

        if not text.strip():
            raise ExtractionFailed("No text could be extracted from document")
        return text

"""
External capability interfaces.

Structural types for the collaborators the engine calls but does not
implement itself: text extraction, embedding and answer generation.
Concrete adapters live next to their callers; tests substitute fakes.

Dependencies: typing
System role: Seams between the engine and model/extraction providers
"""

from typing import Protocol, Sequence, runtime_checkable

from docqa.boundary.vdb.vector_schemas import Passage


@runtime_checkable
class TextExtractor(Protocol):
    """Turns raw document bytes into plain text."""

    async def extract(self, raw: bytes, media_type: str) -> str:
        """
        Raises:
            UnsupportedMediaType: No extraction for this media type
            ExtractionFailed: Extraction failed for a supported type
        """
        ...


@runtime_checkable
class Embedder(Protocol):
    """Maps text to a fixed-dimension vector."""

    async def embed(self, text: str) -> list[float]:
        """
        Raises:
            EmbeddingUnavailable: The embedding provider failed
        """
        ...


@runtime_checkable
class AnswerGenerator(Protocol):
    """Produces an answer grounded in retrieved passages."""

    async def answer(self, question: str, passages: Sequence[Passage]) -> str:
        """
        Returns the insufficient-information sentinel when the passages
        do not support an answer.

        Raises:
            GenerationUnavailable: The generation provider failed
        """
        ...

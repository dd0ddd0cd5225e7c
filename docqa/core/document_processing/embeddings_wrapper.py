"""
Google Generative AI embeddings adapter.

Wraps GoogleGenerativeAIEmbeddings so every call uses the configured
output dimensionality, and exposes it through the async Embedder
interface used by ingestion and query handling.

Dependencies: langchain_google_genai, python-dotenv
System role: Embedding capability backed by Gemini
"""

import logging
from typing import List

from dotenv import load_dotenv
from langchain_google_genai import GoogleGenerativeAIEmbeddings

from docqa.configs import LLMSettings, get_settings
from docqa.core.exceptions import EmbeddingUnavailable

logger = logging.getLogger(__name__)
load_dotenv()


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """
    GoogleGenerativeAIEmbeddings with a fixed output dimensionality.

    The base class does not apply output_dimensionality from the
    constructor, so it is injected into every query call instead.
    """

    _output_dimensionality: int | None = None

    def __init__(
        self,
        model: str = "models/gemini-embedding-001",
        output_dimensionality: int | None = None,
        **kwargs,
    ) -> None:
        """
        Args:
            model: Gemini embedding model ID
            output_dimensionality: Fixed vector length (None keeps the model default)
            **kwargs: Additional arguments for GoogleGenerativeAIEmbeddings
        """
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality
        logger.info(
            f"{__name__}:__init__ - Initialized with model={model}, "
            f"output_dimensionality={output_dimensionality}"
        )

    def embed_query(
        self,
        text: str,
        task_type: str | None = None,
        title: str | None = None,
        output_dimensionality: int | None = None,
    ) -> List[float]:
        """Embed a single text with the configured dimension unless overridden."""
        return super().embed_query(
            text,
            task_type=task_type,
            title=title,
            output_dimensionality=output_dimensionality or self._output_dimensionality,
        )

    async def aembed_query(
        self,
        text: str,
        task_type: str | None = None,
        title: str | None = None,
        output_dimensionality: int | None = None,
    ) -> List[float]:
        """Async variant of embed_query."""
        return await super().aembed_query(
            text,
            task_type=task_type,
            title=title,
            output_dimensionality=output_dimensionality or self._output_dimensionality,
        )


class GeminiEmbedder:
    """Embedder backed by Gemini embeddings."""

    def __init__(
        self,
        settings: LLMSettings | None = None,
        embeddings: GoogleGenerativeAIEmbeddings | None = None,
    ) -> None:
        """
        Args:
            settings: LLM settings (defaults from environment)
            embeddings: Pre-built LangChain embeddings client
        """
        self._settings = settings or get_settings().llm
        if embeddings is None:
            kwargs = {}
            if self._settings.google_api_key:
                kwargs["google_api_key"] = self._settings.google_api_key
            embeddings = FixedDimensionEmbeddings(
                model=self._settings.embedding_model,
                output_dimensionality=self._settings.embedding_dimension or None,
                **kwargs,
            )
        self._embeddings = embeddings

    async def embed(self, text: str) -> list[float]:
        """
        Embed one text.

        Raises:
            EmbeddingUnavailable: When the Gemini call fails or returns nothing
        """
        try:
            vector = await self._embeddings.aembed_query(text)
        except Exception as e:
            logger.error(f"{__name__}:embed - {type(e).__name__}: {e}")
            raise EmbeddingUnavailable(
                f"Failed to generate embedding: {e}",
                {"model": self._settings.embedding_model},
            ) from e

        if not vector:
            raise EmbeddingUnavailable("Embedding provider returned an empty vector")
        return [float(v) for v in vector]

"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: docqa.configs, docqa.application, docqa.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docqa.application.services import CustomerQueryService, DocumentService, QueryService
from docqa.boundary.db import get_async_db, get_async_session_factory
from docqa.configs import Settings, get_settings
from docqa.core.capabilities import AnswerGenerator, Embedder


class ServiceCache:
    """Container for cached model clients."""

    def __init__(self):
        self._embedder = None
        self._answer_generator = None

    @property
    def embedder(self) -> Embedder:
        """Get cached Gemini embedder."""
        if self._embedder is None:
            from docqa.core.document_processing.embeddings_wrapper import GeminiEmbedder

            self._embedder = GeminiEmbedder()
        return self._embedder

    @property
    def answer_generator(self) -> AnswerGenerator:
        """Get cached Gemini answer generator."""
        if self._answer_generator is None:
            from docqa.core.rag_query.answer_generator import GeminiAnswerGenerator

            self._answer_generator = GeminiAnswerGenerator()
        return self._answer_generator

    def clear(self) -> None:
        """Clear all cached instances."""
        self._embedder = None
        self._answer_generator = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory for work that needs sessions of its own (hybrid lookups)."""
    return get_async_session_factory()


def get_embedder() -> Embedder:
    return get_service_cache().embedder


def get_answer_generator() -> AnswerGenerator:
    return get_service_cache().answer_generator


def get_document_service(
    db: AsyncSession = Depends(get_async_db),
    embedder: Embedder = Depends(get_embedder),
    settings: Settings = Depends(get_settings_dependency),
) -> DocumentService:
    """
    Get document service instance.

    Args:
        db: Async database session (injected via Depends)
        embedder: Embedding capability (injected via Depends)
        settings: Application settings (injected via Depends)

    Returns:
        DocumentService: Document service instance
    """
    return DocumentService(db=db, embedder=embedder, settings=settings.ingestion)


def get_query_service(
    db: AsyncSession = Depends(get_async_db),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    embedder: Embedder = Depends(get_embedder),
    generator: AnswerGenerator = Depends(get_answer_generator),
    settings: Settings = Depends(get_settings_dependency),
) -> QueryService:
    """
    Get query service instance.

    Returns:
        QueryService: Query service wired to the cached Gemini clients
    """
    return QueryService(
        db=db,
        session_factory=session_factory,
        embedder=embedder,
        generator=generator,
        settings=settings.retrieval,
    )


def get_customer_query_service(
    db: AsyncSession = Depends(get_async_db),
    query_service: QueryService = Depends(get_query_service),
) -> CustomerQueryService:
    """Get customer query service instance."""
    return CustomerQueryService(db=db, query_service=query_service)

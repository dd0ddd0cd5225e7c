"""
Shared test fixtures and configuration for entire test suite.

Provides: SQLite-backed async sessions, deterministic embedder, mocked
answer generator, document factory
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import hashlib
import math
import os
import re
from unittest.mock import AsyncMock

# Must be set before docqa.configs builds its settings singletons
os.environ.setdefault("LLM_EMBEDDING_DIMENSION", "16")
os.environ.setdefault("LLM_GOOGLE_API_KEY", "test-key")

import pytest

EMBEDDING_DIMENSION = 16


class HashingEmbedder:
    """
    Deterministic bag-of-words embedder.

    Every lowercase word is hashed into one of EMBEDDING_DIMENSION buckets,
    so texts sharing words get similar vectors.
    """

    def __init__(self, dimension: int = EMBEDDING_DIMENSION) -> None:
        self.dimension = dimension
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        vector = [0.0] * self.dimension
        for word in re.findall(r"[a-z0-9]+", text.lower()):
            bucket = int(hashlib.md5(word.encode()).hexdigest(), 16) % self.dimension
            vector[bucket] += 1.0
        norm = math.sqrt(sum(v * v for v in vector)) or 1.0
        return [v / norm for v in vector]


@pytest.fixture
async def test_engine(tmp_path):
    """
    Create a file-backed SQLite async engine with all tables.

    A file database lets several sessions (hybrid lookups run on their
    own) see the same committed data.

    Yields:
        AsyncEngine: Engine with schema created
    """
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import NullPool

    from docqa.boundary.db.base import Base

    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'docqa_test.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    """Session factory bound to the test engine."""
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture
async def test_async_db(session_factory):
    """
    Create an async database session for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def embedder() -> HashingEmbedder:
    """Deterministic embedder producing EMBEDDING_DIMENSION-long vectors."""
    return HashingEmbedder()


@pytest.fixture
def mock_generator() -> AsyncMock:
    """
    Create mock AnswerGenerator for testing.

    Returns:
        AsyncMock: Generator whose answer() returns a fixed grounded answer
    """
    generator = AsyncMock()
    generator.answer = AsyncMock(return_value="Refunds are accepted within 30 days of purchase.")
    return generator


@pytest.fixture
def make_document(test_async_db):
    """
    Factory creating committed documents.

    Returns:
        Callable: async (filename="doc.txt", status=PROCESSING, visible_to=()) -> DocumentModel
    """
    from docqa.boundary.db.CRUD.document_crud import document_crud
    from docqa.boundary.db.models.document_model import DocumentStatus

    async def _make(
        filename: str = "doc.txt",
        status: DocumentStatus = DocumentStatus.PROCESSING,
        visible_to=(),
        media_type: str = "text/plain",
    ):
        document = await document_crud.create(
            test_async_db,
            filename=filename,
            file_size=100,
            media_type=media_type,
            status=status,
            visible_to=list(visible_to),
        )
        await test_async_db.commit()
        return document

    return _make

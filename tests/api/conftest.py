"""
Fixtures for HTTP API tests.

Services are replaced through FastAPI dependency overrides, so these
tests exercise routing, validation and error mapping only.
"""

from datetime import datetime, timezone
import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from docqa.api.main import create_app


@pytest.fixture
def app():
    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def service_override(app):
    """
    Install a mocked service for a dependency.

    Returns:
        Callable: (dependency) -> MagicMock whose async methods are AsyncMocks
    """

    def _install(dependency):
        service = MagicMock()
        for name in (
            "upload_document",
            "ingest_text",
            "ingest",
            "get_document",
            "list_documents",
            "delete_document",
            "get_stats",
            "answer_question",
            "ask",
            "capture",
            "list_queries",
            "update_status",
        ):
            setattr(service, name, AsyncMock())
        app.dependency_overrides[dependency] = lambda: service
        return service

    return _install


@pytest.fixture
def fake_document():
    """Factory for document-shaped objects accepted by DocumentResponse."""

    def _make(**overrides) -> SimpleNamespace:
        now = datetime.now(timezone.utc)
        values = {
            "id": uuid.uuid4(),
            "filename": "handbook.txt",
            "file_size": 120,
            "media_type": "text/plain",
            "status": "completed",
            "visible_to": ["business_owner", "employee"],
            "error_message": None,
            "created_at": now,
            "updated_at": now,
        }
        values.update(overrides)
        return SimpleNamespace(**values)

    return _make


@pytest.fixture
def fake_customer_query():
    """Factory for customer-query-shaped objects."""

    def _make(**overrides) -> SimpleNamespace:
        values = {
            "id": uuid.uuid4(),
            "question": "Do you ship abroad?",
            "customer_name": "Ada",
            "customer_email": "ada@example.com",
            "status": "pending",
            "created_at": datetime.now(timezone.utc),
        }
        values.update(overrides)
        return SimpleNamespace(**values)

    return _make

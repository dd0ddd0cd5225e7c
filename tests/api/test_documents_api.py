"""
Tests for the document endpoints.

System role: Verification of document routing and error mapping
"""

import uuid

import pytest

from docqa.api.deps import get_document_service
from docqa.boundary.db.models.document_model import DocumentStatus, Role
from docqa.core.document_processing.models import PipelineResult
from docqa.core.exceptions import (
    DocumentNotFoundError,
    EmbeddingUnavailable,
    IngestionConflictError,
    IngestionTimeoutError,
    ValidationError,
)


@pytest.fixture
def document_service(service_override):
    return service_override(get_document_service)


def _result(document) -> PipelineResult:
    return PipelineResult(
        document_id=document.id,
        status=DocumentStatus.COMPLETED,
        chunk_count=3,
        embeddings_created=3,
        processing_time_ms=12.5,
    )


class TestUpload:
    """Tests for POST /documents/upload."""

    def test_upload_should_return_created_document(self, client, document_service, fake_document) -> None:
        # Arrange
        document = fake_document()
        document_service.upload_document.return_value = (document, _result(document))

        # Act
        response = client.post(
            "/api/v1/documents/upload",
            files={"file": ("handbook.txt", b"Opening hours are nine to five.", "text/plain")},
            data={"visible_to": ["employee", "customer"]},
        )

        # Assert
        assert response.status_code == 201
        body = response.json()
        assert body["document"]["id"] == str(document.id)
        assert body["chunk_count"] == 3
        kwargs = document_service.upload_document.await_args.kwargs
        assert kwargs["filename"] == "handbook.txt"
        assert kwargs["raw"] == b"Opening hours are nine to five."
        assert kwargs["media_type"] == "text/plain"
        assert kwargs["visible_to"] == [Role.EMPLOYEE, Role.CUSTOMER]

    def test_rejected_upload_should_return_400(self, client, document_service) -> None:
        document_service.upload_document.side_effect = ValidationError("File too large. Maximum size: 10MB", field="file")

        response = client.post(
            "/api/v1/documents/upload",
            files={"file": ("big.pdf", b"%PDF", "application/pdf")},
        )

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "File too large. Maximum size: 10MB",
            "details": {"field": "file"},
        }

    def test_embedding_outage_should_return_502(self, client, document_service) -> None:
        document_service.upload_document.side_effect = EmbeddingUnavailable("Embedding service unavailable")

        response = client.post(
            "/api/v1/documents/upload",
            files={"file": ("notes.txt", b"Some notes", "text/plain")},
        )

        assert response.status_code == 502
        assert response.json()["success"] is False


class TestIngestText:
    """Tests for POST /documents/text."""

    def test_ingest_text_should_forward_request(self, client, document_service, fake_document) -> None:
        document = fake_document(filename="faq.md", media_type="text/markdown")
        document_service.ingest_text.return_value = (document, _result(document))

        response = client.post(
            "/api/v1/documents/text",
            json={"filename": "faq.md", "text": "# FAQ", "media_type": "text/markdown", "visible_to": ["customer"]},
        )

        assert response.status_code == 201
        document_service.ingest_text.assert_awaited_once_with(
            filename="faq.md",
            text="# FAQ",
            media_type="text/markdown",
            visible_to=[Role.CUSTOMER],
        )

    def test_empty_text_should_fail_request_validation(self, client, document_service) -> None:
        response = client.post("/api/v1/documents/text", json={"filename": "faq.md", "text": ""})

        assert response.status_code == 422
        document_service.ingest_text.assert_not_awaited()


class TestResumeIngestion:
    """Tests for POST /documents/{id}/ingest."""

    def test_resume_should_return_result(self, client, document_service, fake_document) -> None:
        document = fake_document()
        document_service.ingest.return_value = _result(document)
        document_service.get_document.return_value = document

        response = client.post(f"/api/v1/documents/{document.id}/ingest")

        assert response.status_code == 200
        assert response.json()["embeddings_created"] == 3

    def test_concurrent_run_should_return_409(self, client, document_service) -> None:
        document_id = uuid.uuid4()
        document_service.ingest.side_effect = IngestionConflictError(document_id)

        response = client.post(f"/api/v1/documents/{document_id}/ingest")

        assert response.status_code == 409
        assert response.json()["details"] == {"document_id": str(document_id)}

    def test_deadline_should_return_504(self, client, document_service) -> None:
        document_id = uuid.uuid4()
        document_service.ingest.side_effect = IngestionTimeoutError(document_id, 30.0)

        response = client.post(f"/api/v1/documents/{document_id}/ingest")

        assert response.status_code == 504


class TestReadAndDelete:
    """Tests for listing, fetching, stats and deletion."""

    def test_list_should_pass_filters(self, client, document_service, fake_document) -> None:
        document_service.list_documents.return_value = [fake_document(status="failed")]

        response = client.get("/api/v1/documents", params={"status": "failed", "limit": 10})

        assert response.status_code == 200
        assert response.json()["total"] == 1
        document_service.list_documents.assert_awaited_once_with(
            status=DocumentStatus.FAILED, limit=10, offset=0
        )

    def test_list_should_reject_unknown_status(self, client, document_service) -> None:
        response = client.get("/api/v1/documents", params={"status": "archived"})

        assert response.status_code == 422

    def test_stats_should_return_counters(self, client, document_service) -> None:
        document_service.get_stats.return_value = {
            "documents": 2,
            "chunks": 14,
            "cached_answers": 5,
            "customer_queries": 1,
        }

        response = client.get("/api/v1/documents/stats")

        assert response.status_code == 200
        assert response.json()["chunks"] == 14

    def test_unknown_document_should_return_404(self, client, document_service) -> None:
        document_id = uuid.uuid4()
        document_service.get_document.side_effect = DocumentNotFoundError(document_id)

        response = client.get(f"/api/v1/documents/{document_id}")

        assert response.status_code == 404
        assert response.json()["error"] == f"Document not found: {document_id}"

    def test_delete_should_return_204(self, client, document_service) -> None:
        document_id = uuid.uuid4()

        response = client.delete(f"/api/v1/documents/{document_id}")

        assert response.status_code == 204
        document_service.delete_document.assert_awaited_once_with(document_id)

    def test_malformed_id_should_fail_request_validation(self, client, document_service) -> None:
        response = client.get("/api/v1/documents/not-a-uuid")

        assert response.status_code == 422

"""
Document API endpoints.

Routes:
- POST /documents/upload - Upload and ingest a file
- POST /documents/text - Ingest already extracted text
- POST /documents/{id}/ingest - Resume ingestion of an existing document
- GET /documents - List documents
- GET /documents/stats - Knowledge base counters
- GET /documents/{id} - Get document
- DELETE /documents/{id} - Delete document with its chunks and embeddings

Dependencies: docqa.application.services, docqa.models
System role: Document HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status

from docqa.api.deps import get_document_service
from docqa.application.services.document_service import DocumentService
from docqa.boundary.db.models.document_model import DocumentModel, DocumentStatus, Role
from docqa.core.document_processing.models import PipelineResult
from docqa.models.common import ListResponse
from docqa.models.document import (
    DocumentResponse,
    IngestionResponse,
    IngestTextRequest,
    StatsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


def _ingestion_response(document: DocumentModel, result: PipelineResult) -> IngestionResponse:
    return IngestionResponse(
        document=DocumentResponse.model_validate(document),
        chunk_count=result.chunk_count,
        embeddings_created=result.embeddings_created,
        processing_time_ms=result.processing_time_ms,
    )


@router.post("/upload", response_model=IngestionResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile = File(...),
    visible_to: list[Role] = Form(default=[]),
    service: DocumentService = Depends(get_document_service),
) -> IngestionResponse:
    """
    Upload a document and ingest it.

    Args:
        file: Uploaded file (max 10MB; PDF, DOCX, XLSX, XLS, CSV, TXT, Markdown)
        visible_to: Roles allowed to search the document
        service: Injected DocumentService

    Returns:
        IngestionResponse: Completed document with chunk and embedding counts

    Raises:
        400: Rejected upload
        502: Extraction or embedding failed (document left FAILED)
    """
    raw = await file.read()
    logger.info(
        f"{__name__}:upload_document - Upload received",
        extra={"file_name": file.filename, "file_size": len(raw)},
    )
    document, result = await service.upload_document(
        filename=file.filename or "",
        raw=raw,
        media_type=file.content_type,
        visible_to=visible_to,
    )
    return _ingestion_response(document, result)


@router.post("/text", response_model=IngestionResponse, status_code=status.HTTP_201_CREATED)
async def ingest_text(
    request: IngestTextRequest,
    service: DocumentService = Depends(get_document_service),
) -> IngestionResponse:
    """Register and ingest a document from already extracted text."""
    document, result = await service.ingest_text(
        filename=request.filename,
        text=request.text,
        media_type=request.media_type,
        visible_to=request.visible_to,
    )
    return _ingestion_response(document, result)


@router.post("/{document_id}/ingest", response_model=IngestionResponse)
async def resume_ingestion(
    document_id: UUID,
    service: DocumentService = Depends(get_document_service),
) -> IngestionResponse:
    """
    Resume ingestion from the document's stored chunks.

    Completed documents are returned unchanged; a document without chunks
    needs a new upload.
    """
    result = await service.ingest(document_id)
    document = await service.get_document(document_id)
    return _ingestion_response(document, result)


@router.get("", response_model=ListResponse[DocumentResponse])
async def list_documents(
    status_filter: DocumentStatus | None = Query(default=None, alias="status"),
    limit: int | None = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    service: DocumentService = Depends(get_document_service),
) -> ListResponse[DocumentResponse]:
    """List documents, newest first."""
    documents = await service.list_documents(status=status_filter, limit=limit, offset=offset)
    items = [DocumentResponse.model_validate(document) for document in documents]
    return ListResponse[DocumentResponse](items=items, total=len(items))


@router.get("/stats", response_model=StatsResponse)
async def get_stats(service: DocumentService = Depends(get_document_service)) -> StatsResponse:
    """Counts of documents, chunks, cached answers and customer queries."""
    return StatsResponse(**await service.get_stats())


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: UUID,
    service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """Get a document by id."""
    return DocumentResponse.model_validate(await service.get_document(document_id))


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: UUID,
    service: DocumentService = Depends(get_document_service),
) -> Response:
    """Delete a document with its chunks and embeddings."""
    await service.delete_document(document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

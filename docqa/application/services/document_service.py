"""
Document service orchestrator.

Coordinates document registration, ingestion, listing, deletion and
knowledge base statistics. Ingestion runs through IngestionPipeline.

Dependencies: docqa.boundary.db, docqa.core.document_processing
System role: Document management orchestration
"""

import logging
from pathlib import PurePath
from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from docqa.boundary.db.CRUD.chunk_crud import chunk_crud
from docqa.boundary.db.CRUD.customer_query_crud import customer_query_crud
from docqa.boundary.db.CRUD.document_crud import document_crud
from docqa.boundary.db.CRUD.query_cache_crud import query_cache_crud
from docqa.boundary.db.models.document_model import DocumentModel, DocumentStatus, Role
from docqa.configs import IngestionSettings, get_settings
from docqa.core.capabilities import Embedder, TextExtractor
from docqa.core.document_processing.ingestion_pipeline import IngestionPipeline
from docqa.core.document_processing.models import PipelineResult
from docqa.core.exceptions import DocumentNotFoundError, ValidationError

logger = logging.getLogger(__name__)

EXTENSION_MEDIA_TYPES = {
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xls": "application/vnd.ms-excel",
    ".csv": "text/csv",
    ".txt": "text/plain",
    ".md": "text/markdown",
}


def resolve_media_type(filename: str, declared: str | None) -> str:
    """
    Pick the media type for an upload.

    The declared type wins unless it is missing or generic, in which case
    the file extension decides.
    """
    declared = (declared or "").split(";")[0].strip().lower()
    if declared and declared != "application/octet-stream":
        return declared
    return EXTENSION_MEDIA_TYPES.get(PurePath(filename).suffix.lower(), declared or "application/octet-stream")


class DocumentService:
    """
    Document service orchestrator.

    Handles document lifecycle: registration, ingestion, listing, deletion.
    """

    def __init__(
        self,
        db: AsyncSession,
        embedder: Embedder | None = None,
        extractor: TextExtractor | None = None,
        settings: IngestionSettings | None = None,
    ) -> None:
        """
        Initialize document service.

        Args:
            db: AsyncSession for document metadata and content
            embedder: Embedding capability (Gemini if None)
            extractor: Text extraction capability (plain text if None)
            settings: Ingestion settings (defaults from environment)
        """
        self.db = db
        self._embedder = embedder
        self._extractor = extractor
        self._settings = settings or get_settings().ingestion

    @property
    def embedder(self) -> Embedder:
        """Lazy-load the embedder to avoid initialization cost."""
        if self._embedder is None:
            from docqa.core.document_processing.embeddings_wrapper import GeminiEmbedder

            self._embedder = GeminiEmbedder()
        return self._embedder

    def validate_upload(self, filename: str, media_type: str, file_size: int) -> None:
        """
        Check an upload against the size and media type limits.

        Raises:
            ValidationError: Empty name, empty or oversized file, or disallowed type
        """
        if not filename.strip():
            raise ValidationError("Filename is required", field="filename")
        if file_size <= 0:
            raise ValidationError("File is empty", field="file")
        if file_size > self._settings.max_file_size:
            raise ValidationError(
                f"File too large. Maximum size: {self._settings.max_file_size // (1024 * 1024)}MB",
                field="file",
                details={"file_size": file_size},
            )
        if media_type not in self._settings.allowed_media_types:
            raise ValidationError(
                f"Unsupported file type: {media_type}",
                field="media_type",
                details={"allowed": self._settings.allowed_media_types},
            )

    async def create_document(
        self,
        filename: str,
        file_size: int,
        media_type: str,
        storage_path: str | None = None,
        visible_to: Iterable[Role] | None = None,
    ) -> DocumentModel:
        """
        Register a document in PROCESSING status.

        Args:
            filename: Original filename
            file_size: Size in bytes
            media_type: MIME type
            storage_path: Pointer to the raw bytes in external storage
            visible_to: Roles allowed to search it (owner always included)

        Returns:
            DocumentModel: The committed document
        """
        document = await document_crud.create(
            self.db,
            filename=filename,
            file_size=file_size,
            media_type=media_type,
            storage_path=storage_path,
            status=DocumentStatus.PROCESSING,
            visible_to=list(visible_to or []),
        )
        await self.db.commit()
        logger.info(
            f"{__name__}:create_document - Document registered",
            extra={"document_id": str(document.id), "media_type": media_type},
        )
        return document

    async def ingest(
        self,
        document_id: UUID,
        raw: bytes | None = None,
        text: str | None = None,
        timeout: float | None = None,
    ) -> PipelineResult:
        """
        Run the ingestion pipeline for a registered document.

        Raises:
            DocumentNotFoundError: Document does not exist
            IngestionConflictError: Another run holds the document
            UpstreamUnavailable: Extraction or embedding failed (document FAILED)
        """
        pipeline = IngestionPipeline(
            self.db,
            embedder=self.embedder,
            extractor=self._extractor,
            settings=self._settings,
        )
        return await pipeline.run(document_id, text=text, raw=raw, timeout=timeout)

    async def upload_document(
        self,
        filename: str,
        raw: bytes,
        media_type: str | None = None,
        visible_to: Iterable[Role] | None = None,
        storage_path: str | None = None,
    ) -> tuple[DocumentModel, PipelineResult]:
        """
        Validate, register and ingest an uploaded file.

        Steps:
        1. Resolve and validate media type and size
        2. Create the document record (PROCESSING)
        3. Extract, chunk and embed through the pipeline

        Returns:
            tuple: Refreshed document and the pipeline result

        Raises:
            ValidationError: Upload rejected before anything is stored
            UpstreamUnavailable: Ingestion failed; the document is FAILED
        """
        media_type = resolve_media_type(filename, media_type)
        self.validate_upload(filename, media_type, len(raw))

        document = await self.create_document(
            filename=filename,
            file_size=len(raw),
            media_type=media_type,
            storage_path=storage_path,
            visible_to=visible_to,
        )
        result = await self.ingest(document.id, raw=raw)
        return await self.get_document(document.id), result

    async def ingest_text(
        self,
        filename: str,
        text: str,
        media_type: str = "text/plain",
        visible_to: Iterable[Role] | None = None,
    ) -> tuple[DocumentModel, PipelineResult]:
        """Register and ingest a document whose text is already extracted."""
        if not text.strip():
            raise ValidationError("Text is empty", field="text")
        document = await self.create_document(
            filename=filename,
            file_size=len(text.encode("utf-8")),
            media_type=media_type,
            visible_to=visible_to,
        )
        result = await self.ingest(document.id, text=text)
        return await self.get_document(document.id), result

    async def get_document(self, document_id: UUID) -> DocumentModel:
        """
        Raises:
            DocumentNotFoundError: Document does not exist
        """
        document = await document_crud.get_by_id(self.db, document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        await self.db.refresh(document)
        return document

    async def list_documents(
        self,
        status: DocumentStatus | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        """List documents newest first, optionally filtered by status."""
        if status is not None:
            return await document_crud.get_by_status(self.db, status, limit=limit, offset=offset)
        return await document_crud.get_all(self.db, limit=limit, offset=offset)

    async def delete_document(self, document_id: UUID) -> None:
        """
        Delete a document with its chunks and embeddings.

        Raises:
            DocumentNotFoundError: Document does not exist
        """
        deleted = await document_crud.delete_with_contents(self.db, document_id)
        if not deleted:
            await self.db.rollback()
            raise DocumentNotFoundError(document_id)
        await self.db.commit()
        logger.info(f"{__name__}:delete_document - Document deleted", extra={"document_id": str(document_id)})

    async def get_stats(self) -> dict[str, int]:
        """Counts of documents, chunks, cached answers and captured customer queries."""
        return {
            "documents": await document_crud.count(self.db),
            "chunks": await chunk_crud.count(self.db),
            "cached_answers": await query_cache_crud.count(self.db),
            "customer_queries": await customer_query_crud.count(self.db),
        }

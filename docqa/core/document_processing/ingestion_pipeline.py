"""
Document ingestion pipeline orchestrator.

Coordinates extraction, chunking and embedding for one document and
moves its status through PROCESSING → CHUNKS_CREATED → COMPLETED.
Any failure marks the document FAILED with a readable message; chunks
and embeddings persisted before the failure are kept, so a later run
resumes from where this one stopped.

A run holds two claims on its document: an in-process one and a
timestamp on the document row, so workers in other processes refuse
the document too.

Dependencies: asyncio, sqlalchemy, all task modules, docqa.configs
System role: Pipeline orchestration (coordinates only)
"""

import asyncio
import logging
import time
from contextlib import contextmanager
from datetime import timedelta
from typing import Iterator
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from docqa.boundary.db.base import utcnow
from docqa.boundary.db.CRUD.document_crud import document_crud
from docqa.boundary.db.models.document_model import DocumentStatus
from docqa.boundary.vdb.chunk_store import ChunkStore
from docqa.configs import IngestionSettings, get_settings
from docqa.core.capabilities import Embedder, TextExtractor
from docqa.core.document_processing.models import PipelineResult
from docqa.core.document_processing.status_machine import StatusEvent, transition
from docqa.core.document_processing.tasks import ChunkingTask, EmbeddingTask, PlainTextExtractor
from docqa.core.exceptions import (
    DocumentNotFoundError,
    IngestionConflictError,
    IngestionTimeoutError,
    ValidationError,
)
from docqa.observability.log_utils import truncate_error

logger = logging.getLogger(__name__)

# Documents with a run in progress in this process
_active_documents: set[UUID] = set()


@contextmanager
def claim_document(document_id: UUID) -> Iterator[None]:
    """
    Hold the single-writer claim on a document for the duration of a run.

    Raises:
        IngestionConflictError: If another run holds the claim
    """
    if document_id in _active_documents:
        raise IngestionConflictError(document_id)
    _active_documents.add(document_id)
    try:
        yield
    finally:
        _active_documents.discard(document_id)


class IngestionPipeline:
    """Orchestrate document ingestion: extract -> chunk -> store -> embed -> complete."""

    def __init__(
        self,
        session: AsyncSession,
        embedder: Embedder,
        extractor: TextExtractor | None = None,
        settings: IngestionSettings | None = None,
        store: ChunkStore | None = None,
    ) -> None:
        """
        Initialize pipeline with its collaborators.

        Args:
            session: Session used for every write of the run
            embedder: Embedding capability
            extractor: Text extraction capability (plain text by default)
            settings: Ingestion settings (defaults from environment)
            store: Chunk store bound to `session`
        """
        self.session = session
        self._settings = settings or get_settings().ingestion
        self._extractor = extractor or PlainTextExtractor()
        self._store = store or ChunkStore(session)
        self._chunking_task = ChunkingTask(
            chunk_size=self._settings.chunk_size,
            chunk_overlap=self._settings.chunk_overlap,
        )
        self._embedding_task = EmbeddingTask(embedder, concurrency=self._settings.embedding_concurrency)

    async def run(
        self,
        document_id: UUID,
        text: str | None = None,
        raw: bytes | None = None,
        timeout: float | None = None,
    ) -> PipelineResult:
        """
        Ingest a document, resuming from its current status.

        Text comes from `text` when given, otherwise from extracting `raw`
        with the document's media type. Neither is needed once chunks exist.

        Args:
            document_id: Document to ingest
            text: Already extracted text
            raw: Raw document bytes
            timeout: Deadline in seconds (defaults to settings.timeout_seconds)

        Returns:
            PipelineResult: Final status and counts

        Raises:
            DocumentNotFoundError: Document does not exist
            IngestionConflictError: Another run holds the document
            ValidationError: No chunks exist and no text or bytes were given
            IngestionTimeoutError: Deadline elapsed; status left unchanged
            UpstreamUnavailable: Extraction or embedding failed; document FAILED
        """
        timeout = self._settings.timeout_seconds if timeout is None else timeout

        with claim_document(document_id):
            await self._claim(document_id)
            try:
                if timeout is None:
                    return await self._run(document_id, text, raw)
                return await asyncio.wait_for(self._run(document_id, text, raw), timeout=timeout)
            except asyncio.TimeoutError:
                logger.warning(
                    f"{__name__}:run - Deadline exceeded, status left unchanged",
                    extra={"document_id": str(document_id), "timeout": timeout},
                )
                raise IngestionTimeoutError(document_id, timeout) from None
            finally:
                await self._release(document_id)

    async def _claim(self, document_id: UUID) -> None:
        """
        Take the row-level claim shared by every worker.

        Raises:
            DocumentNotFoundError: Document does not exist
            IngestionConflictError: Another worker holds a fresh claim
        """
        now = utcnow()
        stale_before = now - timedelta(seconds=self._settings.claim_ttl_seconds)
        claimed = await document_crud.claim_for_ingestion(self.session, document_id, now, stale_before)
        await self.session.commit()
        if claimed:
            return
        if await document_crud.get_by_id(self.session, document_id) is None:
            raise DocumentNotFoundError(document_id)
        raise IngestionConflictError(document_id)

    async def _release(self, document_id: UUID) -> None:
        try:
            await document_crud.release_ingestion_claim(self.session, document_id)
            await self.session.commit()
        except Exception as e:
            # Left to expire after claim_ttl_seconds
            logger.error(f"{__name__}:_release - Could not release claim: {type(e).__name__}: {e}")
            await self.session.rollback()

    async def _run(self, document_id: UUID, text: str | None, raw: bytes | None) -> PipelineResult:
        start_time = time.perf_counter()

        document = await document_crud.get_by_id(self.session, document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)

        status = document.status
        media_type = document.media_type

        if status == DocumentStatus.COMPLETED:
            logger.info(
                f"{__name__}:run - Document already completed, nothing to do",
                extra={"document_id": str(document_id)},
            )
            return PipelineResult(
                document_id=document_id,
                status=status,
                chunk_count=await self._store.count_chunks(document_id),
                processing_time_ms=(time.perf_counter() - start_time) * 1000,
                skipped=True,
            )

        chunk_count = await self._store.count_chunks(document_id)
        if status in (DocumentStatus.PROCESSING, DocumentStatus.FAILED) and chunk_count == 0:
            if text is None and raw is None:
                raise ValidationError("Document has no chunks; text or raw bytes are required", field="text")

        embeddings_created = 0
        try:
            if status == DocumentStatus.FAILED:
                status = await self._apply(document_id, status, StatusEvent.RETRY)

            if status == DocumentStatus.PROCESSING:
                if chunk_count == 0:
                    source_text = text if text is not None else await self._extractor.extract(raw, media_type)
                    chunks = self._chunking_task.chunk(source_text)
                    await self._store.put_chunks(document_id, chunks)
                    chunk_count = len(chunks)
                    logger.info(
                        f"{__name__}:run - Chunks created",
                        extra={"document_id": str(document_id), "chunk_count": chunk_count},
                    )
                # Commits the chunk batch together with the status change
                status = await self._apply(document_id, status, StatusEvent.CHUNKS_STORED)

            if status == DocumentStatus.CHUNKS_CREATED:
                embeddings_created = await self._embedding_task.embed_missing(
                    self.session, self._store, document_id
                )
                status = await self._apply(document_id, status, StatusEvent.EMBEDDINGS_STORED)

        except asyncio.CancelledError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            await self._mark_failed(document_id, e)
            raise

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{__name__}:run - Ingestion complete",
            extra={
                "document_id": str(document_id),
                "chunk_count": chunk_count,
                "embeddings_created": embeddings_created,
                "processing_time_ms": round(elapsed_ms, 2),
            },
        )
        return PipelineResult(
            document_id=document_id,
            status=status,
            chunk_count=chunk_count,
            embeddings_created=embeddings_created,
            processing_time_ms=elapsed_ms,
        )

    async def _apply(self, document_id: UUID, status: DocumentStatus, event: StatusEvent) -> DocumentStatus:
        """Validate and commit a status transition; returns the new status."""
        new_status = transition(status, event)
        await document_crud.update_status(self.session, document_id, new_status)
        await self.session.commit()
        logger.info(
            f"{__name__}:_apply - {status.value} -> {new_status.value}",
            extra={"document_id": str(document_id), "event": event.value},
        )
        return new_status

    async def _mark_failed(self, document_id: UUID, error: BaseException) -> None:
        """Record the failure on the document; the original error is re-raised by the caller."""
        message = truncate_error(error, self._settings.max_error_length)
        try:
            document = await document_crud.get_by_id(self.session, document_id)
            if document is None:
                return
            failed = transition(document.status, StatusEvent.FAILED)
            await document_crud.update_status(self.session, document_id, failed, error_message=message)
            await self.session.commit()
            logger.error(
                f"{__name__}:_mark_failed - Document marked as FAILED",
                extra={"document_id": str(document_id), "error": message},
            )
        except Exception as e:
            logger.error(f"{__name__}:_mark_failed - Could not record failure: {type(e).__name__}: {e}")
            await self.session.rollback()

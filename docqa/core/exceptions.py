"""
Exception hierarchy for the document Q&A engine.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class DocQAException(Exception):
    """Base exception for all document Q&A application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(DocQAException):
    """Raised when input validation fails. Nothing is persisted."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class ConstraintViolation(DocQAException):
    """Raised when a uniqueness or foreign key constraint is violated."""

    pass


# ---------------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------------


class NotFoundError(DocQAException):
    """Base exception for missing entities."""

    pass


class DocumentNotFoundError(NotFoundError):
    """Raised when a document cannot be found."""

    def __init__(self, document_id: Any, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["document_id"] = str(document_id)
        super().__init__(f"Document not found: {document_id}", details)


class ChunkNotFoundError(NotFoundError):
    """Raised when a chunk cannot be found."""

    def __init__(self, chunk_id: Any, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["chunk_id"] = str(chunk_id)
        super().__init__(f"Chunk not found: {chunk_id}", details)


class CustomerQueryNotFoundError(NotFoundError):
    """Raised when a captured customer query cannot be found."""

    def __init__(self, query_id: Any, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["customer_query_id"] = str(query_id)
        super().__init__(f"Customer query not found: {query_id}", details)


class NoAccessibleDocumentsError(NotFoundError):
    """Raised when a role has no completed documents it may search."""

    def __init__(self, role: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["role"] = role
        super().__init__("No documents available", details)


# ---------------------------------------------------------------------------
# External capabilities
# ---------------------------------------------------------------------------


class UpstreamUnavailable(DocQAException):
    """Base exception for failures of external capabilities."""

    pass


class UnsupportedMediaType(UpstreamUnavailable):
    """Raised when no extractor handles the document's media type."""

    def __init__(self, media_type: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["media_type"] = media_type
        super().__init__(f"Unsupported media type: {media_type}", details)


class ExtractionFailed(UpstreamUnavailable):
    """Raised when text extraction fails for a supported media type."""

    def __init__(self, reason: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["reason"] = reason
        super().__init__(f"Text extraction failed: {reason}", details)


class EmbeddingUnavailable(UpstreamUnavailable):
    """Raised when the embedding capability fails."""

    pass


class GenerationUnavailable(UpstreamUnavailable):
    """Raised when the answer generation capability fails or times out."""

    pass


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------


class DocumentProcessingError(DocQAException):
    """Base exception for document ingestion errors."""

    def __init__(
        self,
        message: str,
        document_id: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            document_id: ID of the document that failed
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = str(document_id)
        super().__init__(message, details)


class InvalidStatusTransition(DocumentProcessingError):
    """Raised when a status change is not in the transition table."""

    def __init__(self, state: str, event: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details.update({"state": state, "event": event})
        super().__init__(f"Invalid transition: {event} from {state}", details=details)


class IngestionConflictError(DocumentProcessingError):
    """Raised when a pipeline run is already active for the document."""

    def __init__(self, document_id: Any) -> None:
        super().__init__("Ingestion already running for document", document_id)


class IngestionTimeoutError(DocumentProcessingError):
    """Raised when an ingestion run exceeds its deadline."""

    def __init__(self, document_id: Any, timeout: float) -> None:
        super().__init__(
            f"Ingestion exceeded deadline of {timeout}s",
            document_id,
            {"timeout": timeout},
        )


# ---------------------------------------------------------------------------
# Retrieval
# ---------------------------------------------------------------------------


class RetrievalError(DocQAException):
    """Raised when retrieval operations fail."""

    pass

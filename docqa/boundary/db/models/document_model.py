"""
Document ORM model.

Represents uploaded documents with processing status and role visibility.
Tracks the ingestion lifecycle from upload to searchable embeddings.

Dependencies: sqlalchemy, docqa.boundary.db.base
System role: Document persistence for ingestion tracking
"""

import enum
from datetime import datetime
from typing import Iterable

from sqlalchemy import JSON, DateTime, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from docqa.boundary.db.base import Base, UUIDMixin, TimestampMixin


class Role(str, enum.Enum):
    """
    Caller roles used for document visibility and cache partitioning.

    BUSINESS_OWNER: Sees every document
    EMPLOYEE: Sees documents shared with staff
    CUSTOMER: External caller, sees documents shared with customers
    """

    BUSINESS_OWNER = "business_owner"
    EMPLOYEE = "employee"
    CUSTOMER = "customer"


class DocumentStatus(str, enum.Enum):
    """
    Document ingestion lifecycle states.

    PROCESSING: Created; text is being extracted and chunked
    CHUNKS_CREATED: Every chunk persisted; embeddings in progress
    COMPLETED: Every chunk has an embedding; searchable
    FAILED: Ingestion error; error_message field contains details
    """

    PROCESSING = "processing"
    CHUNKS_CREATED = "chunks_created"
    COMPLETED = "completed"
    FAILED = "failed"


def normalize_visibility(roles: Iterable[Role | str] | None) -> list[str]:
    """
    Normalise a role collection into the stored visibility list.

    The owner role is always present. Unknown role names raise ValueError.

    Args:
        roles: Roles the document is shared with

    Returns:
        list[str]: Sorted, de-duplicated role values
    """
    values = {Role(role).value for role in (roles or [])}
    values.add(Role.BUSINESS_OWNER.value)
    return sorted(values)


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model tracking ingestion pipeline state.

    Lifecycle: PROCESSING → CHUNKS_CREATED → COMPLETED, with FAILED
    reachable from any state. Transitions are validated by the status
    machine in docqa.core.document_processing.status_machine.

    Attributes:
        id: UUID primary key (auto-generated)
        filename: Original filename (255 char limit)
        file_size: Raw document size in bytes
        media_type: MIME type of the raw document
        storage_path: Pointer to the raw bytes in external storage
        status: Current processing state
        error_message: Null unless FAILED; human-readable failure reason
        visible_to: Roles allowed to search this document (owner always included)
        ingestion_claimed_at: Set while an ingestion run holds the document

    Relationships:
        chunks: Ordered passages of this document (deleted with it)
    """

    __tablename__ = "documents"

    filename: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Original filename",
    )

    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    media_type: Mapped[str] = mapped_column(String(255), nullable=False)

    storage_path: Mapped[str | None] = mapped_column(
        String(1024),
        nullable=True,
        doc="Storage pointer for the raw document",
    )

    status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus, native_enum=False),
        nullable=False,
        default=DocumentStatus.PROCESSING,
    )

    error_message: Mapped[str | None] = mapped_column(
        String(2048),
        nullable=True,
        doc="Error details if processing failed",
    )

    visible_to: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=lambda: [Role.BUSINESS_OWNER.value],
    )

    ingestion_claimed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="When the running ingestion claimed this document",
    )

    chunks = relationship(
        "ChunkModel",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ChunkModel.chunk_index",
    )

    @validates("visible_to")
    def _validate_visible_to(self, key: str, roles: Iterable[Role | str] | None) -> list[str]:
        return normalize_visibility(roles)

    def is_visible_to(self, role: Role | str) -> bool:
        """Return True when callers with `role` may search this document."""
        return Role(role).value in normalize_visibility(self.visible_to)

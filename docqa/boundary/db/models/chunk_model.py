"""
Chunk and embedding ORM models.

A chunk is one passage of a document's extracted text; an embedding is
the single vector computed for a chunk.

Dependencies: sqlalchemy, docqa.boundary.db.base
System role: Passage and vector persistence for retrieval
"""

import uuid

from sqlalchemy import JSON, ForeignKey, Integer, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docqa.boundary.db.base import Base, UUIDMixin, TimestampMixin


class ChunkModel(Base, UUIDMixin, TimestampMixin):
    """
    Chunk ORM model.

    Created in bulk by the ingestion pipeline and never modified.

    Attributes:
        document_id: Owning document (cascade delete)
        content: Passage text
        chunk_index: Zero-based position within the document
        chunk_metadata: Optional free-form metadata (column "metadata")

    Constraints:
        (document_id, chunk_index): UNIQUE
    """

    __tablename__ = "chunks"
    __table_args__ = (
        UniqueConstraint("document_id", "chunk_index", name="uq_chunks_document_index"),
    )

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)

    chunk_metadata: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)

    document = relationship("DocumentModel", back_populates="chunks")
    embedding = relationship(
        "EmbeddingModel",
        back_populates="chunk",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class EmbeddingModel(Base, UUIDMixin, TimestampMixin):
    """
    Embedding ORM model.

    One vector per chunk. Replaced by delete and reinsert, never updated.

    Attributes:
        chunk_id: Embedded chunk (unique, cascade delete)
        vector: Fixed-dimension float vector
    """

    __tablename__ = "embeddings"

    chunk_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("chunks.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    vector: Mapped[list[float]] = mapped_column(JSON, nullable=False)

    chunk = relationship("ChunkModel", back_populates="embedding")

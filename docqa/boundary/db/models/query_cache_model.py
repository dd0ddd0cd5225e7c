"""
Answer cache ORM model.

Stores generated answers keyed by exact question text and caller role,
together with the question's embedding for similarity lookups.

Dependencies: sqlalchemy, docqa.boundary.db.base
System role: Semantic answer cache persistence
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Enum, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from docqa.boundary.db.base import Base, UUIDMixin, TimestampMixin, utcnow
from docqa.boundary.db.models.document_model import Role


class QueryCacheModel(Base, UUIDMixin, TimestampMixin):
    """
    Cached answer for a (question, role) pair.

    Attributes:
        question: Exact question text (write key)
        role: Role the answer was produced for
        question_embedding: Question vector (read key, compared by cosine similarity)
        answer: Generated answer text
        sources: Source references returned with the answer
        hit_count: Times this entry was written or served
        last_hit_at: Last time the entry was written or served

    Constraints:
        (question, role): UNIQUE
    """

    __tablename__ = "query_cache"
    __table_args__ = (
        UniqueConstraint("question", "role", name="uq_query_cache_question_role"),
    )

    question: Mapped[str] = mapped_column(Text, nullable=False)

    role: Mapped[Role] = mapped_column(
        Enum(Role, native_enum=False),
        nullable=False,
        index=True,
    )

    question_embedding: Mapped[list[float]] = mapped_column(JSON, nullable=False)

    answer: Mapped[str] = mapped_column(Text, nullable=False)

    sources: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)

    hit_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    last_hit_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

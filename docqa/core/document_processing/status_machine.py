"""
Document status transition table.

Status changes are driven by events rather than free assignment:
PROCESSING → CHUNKS_CREATED → COMPLETED, FAILED from anywhere, and a
RETRY edge that re-opens a failed document for another run.

Dependencies: docqa.boundary.db.models, docqa.core.exceptions
System role: Single source of truth for ingestion status transitions
"""

import enum

from docqa.boundary.db.models.document_model import DocumentStatus
from docqa.core.exceptions import InvalidStatusTransition


class StatusEvent(str, enum.Enum):
    """Events that move a document between statuses."""

    CHUNKS_STORED = "chunks_stored"
    EMBEDDINGS_STORED = "embeddings_stored"
    FAILED = "failed"
    RETRY = "retry"


TRANSITIONS: dict[tuple[DocumentStatus, StatusEvent], DocumentStatus] = {
    (DocumentStatus.PROCESSING, StatusEvent.CHUNKS_STORED): DocumentStatus.CHUNKS_CREATED,
    (DocumentStatus.CHUNKS_CREATED, StatusEvent.EMBEDDINGS_STORED): DocumentStatus.COMPLETED,
    (DocumentStatus.FAILED, StatusEvent.RETRY): DocumentStatus.PROCESSING,
    **{(status, StatusEvent.FAILED): DocumentStatus.FAILED for status in DocumentStatus},
}


def transition(state: DocumentStatus, event: StatusEvent) -> DocumentStatus:
    """
    Return the status reached from `state` on `event`.

    Args:
        state: Current document status
        event: Event being applied

    Returns:
        DocumentStatus: Next status

    Raises:
        InvalidStatusTransition: If the table has no edge for (state, event)
    """
    try:
        return TRANSITIONS[(DocumentStatus(state), StatusEvent(event))]
    except KeyError:
        raise InvalidStatusTransition(DocumentStatus(state).value, StatusEvent(event).value) from None


def can_transition(state: DocumentStatus, event: StatusEvent) -> bool:
    """Return True when `event` is allowed from `state`."""
    return (DocumentStatus(state), StatusEvent(event)) in TRANSITIONS

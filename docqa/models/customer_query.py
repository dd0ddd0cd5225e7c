"""
Customer query API schemas.

Dependencies: pydantic
System role: Customer-facing API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from docqa.boundary.db.models.customer_query_model import CustomerQueryStatus
from docqa.models.query import SourceReference


class CustomerAskRequest(BaseModel):
    """Question from an external customer."""

    question: str


class CustomerAskResponse(BaseModel):
    """Answer for a customer, flagging when contact details should be collected."""

    answer: str
    sources: list[SourceReference] = Field(default_factory=list)
    needs_contact: bool = Field(description="True when the question could not be answered")


class CustomerContactRequest(BaseModel):
    """Contact details captured for an unanswered question."""

    question: str = Field(min_length=1, max_length=5000)
    customer_name: str = Field(min_length=1, max_length=255)
    customer_email: str = Field(max_length=320, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class CustomerQueryResponse(BaseModel):
    """Captured customer query."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    question: str
    customer_name: str
    customer_email: str
    status: CustomerQueryStatus
    created_at: datetime


class CustomerQueryStatusUpdate(BaseModel):
    """Status change for a captured query."""

    status: CustomerQueryStatus

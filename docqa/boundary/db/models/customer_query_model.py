"""
Customer query ORM model.

Questions from external callers that the system could not answer,
captured with contact details for a human follow-up.

Dependencies: sqlalchemy, docqa.boundary.db.base
System role: Follow-up queue persistence
"""

import enum

from sqlalchemy import Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from docqa.boundary.db.base import Base, UUIDMixin, TimestampMixin


class CustomerQueryStatus(str, enum.Enum):
    """
    Follow-up states.

    PENDING: Awaiting a reply
    RESPONDED: Someone replied to the customer
    ARCHIVED: Closed without further action
    """

    PENDING = "pending"
    RESPONDED = "responded"
    ARCHIVED = "archived"


class CustomerQueryModel(Base, UUIDMixin, TimestampMixin):
    """
    Captured customer question awaiting follow-up.

    Attributes:
        question: Question the customer asked
        customer_name: Contact name
        customer_email: Contact email address
        status: Follow-up state
    """

    __tablename__ = "customer_queries"

    question: Mapped[str] = mapped_column(Text, nullable=False)

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)

    customer_email: Mapped[str] = mapped_column(String(320), nullable=False)

    status: Mapped[CustomerQueryStatus] = mapped_column(
        Enum(CustomerQueryStatus, native_enum=False),
        nullable=False,
        default=CustomerQueryStatus.PENDING,
        index=True,
    )

"""
Common response models.

Error schema and list wrappers shared by the routers.

Dependencies: pydantic
System role: Common API response structures
"""

from typing import Generic, TypeVar
from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorResponse(BaseModel):
    """Error response schema."""

    success: bool = False
    error: str = Field(description="Error message")
    details: dict | None = Field(default=None, description="Additional error context")


class ListResponse(BaseModel, Generic[T]):
    """List response with total count."""

    items: list[T]
    total: int

"""
Customer query CRUD operations.

Dependencies: sqlalchemy, docqa.boundary.db.models
System role: Follow-up queue persistence operations
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docqa.boundary.db.models.customer_query_model import CustomerQueryModel, CustomerQueryStatus
from docqa.boundary.db.CRUD.base_crud import BaseCRUD


class CustomerQueryCRUD(BaseCRUD[CustomerQueryModel]):
    """CRUD operations for CustomerQueryModel."""

    def __init__(self) -> None:
        """Initialize CustomerQueryCRUD with CustomerQueryModel."""
        super().__init__(CustomerQueryModel)

    async def get_by_status(
        self,
        session: AsyncSession,
        status: CustomerQueryStatus | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[CustomerQueryModel]:
        """
        Retrieve captured queries, newest first, optionally filtered by status.

        Args:
            session: Async database session
            status: Status filter (None for all)
            limit: Maximum number of records to return
            offset: Number of records to skip

        Returns:
            Sequence of CustomerQueryModels
        """
        stmt = select(CustomerQueryModel).order_by(CustomerQueryModel.created_at.desc())
        if status is not None:
            stmt = stmt.where(CustomerQueryModel.status == status)
        stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()


customer_query_crud = CustomerQueryCRUD()

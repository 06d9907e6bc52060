"""
Layerpost Backend — Generic Data-Access Repository
===================================================

What:  CRUD operations for one ORM model against an AsyncSession.
Why:   Services depend on this narrow interface instead of on SQLAlchemy
       queries, so business rules can be tested with a mocked repository.
How:   `Repository(Post, session)`: the model definition is fixed at
       construction, the session is the request-scoped one from
       `get_db_session`.

Error Contract:
    - Missing rows are reported as None / False, never as exceptions.
    - Any SQLAlchemyError rolls the session back and is re-raised as
      DatabaseError (original chained), so the request-level commit in
      `get_db_session` starts from a clean transaction.
    - Writes are flushed, not committed; the session dependency commits.
"""

import logging
from typing import Any, Generic, List, Mapping, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base
from app.exceptions import DatabaseError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """Async CRUD repository bound to a single model class."""

    def __init__(self, model: Type[ModelT], session: AsyncSession):
        self.model = model
        self.session = session

    @property
    def resource_name(self) -> str:
        return self.model.__name__.lower()

    async def create(self, data: Mapping[str, Any]) -> ModelT:
        """Insert a new row and return it with server-side defaults loaded."""
        record = self.model(**data)
        self.session.add(record)
        try:
            await self.session.flush()
            await self.session.refresh(record)
        except SQLAlchemyError as e:
            await self._fail("create", e)
        logger.debug("Created %s %s", self.resource_name, getattr(record, "id", None))
        return record

    async def get(self, record_id: Any) -> Optional[ModelT]:
        try:
            return await self.session.get(self.model, record_id)
        except SQLAlchemyError as e:
            await self._fail("get", e)

    async def list(
        self,
        limit: int = 20,
        offset: int = 0,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[ModelT]:
        """
        One page of rows, optionally sorted by the column named `order_by`.

        Raises:
            ValueError: `order_by` is not a column of the model.
        """
        query = select(self.model)
        if order_by is not None:
            column = self.model.__table__.columns.get(order_by)
            if column is None:
                raise ValueError(f"{self.model.__name__} has no column '{order_by}'")
            query = query.order_by(column.desc() if descending else column.asc())
        query = query.limit(limit).offset(offset)
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            await self._fail("list", e)
        return list(result.scalars().all())

    async def count(self) -> int:
        try:
            result = await self.session.execute(select(func.count()).select_from(self.model))
        except SQLAlchemyError as e:
            await self._fail("count", e)
        return result.scalar() or 0

    async def update(self, record_id: Any, changes: Mapping[str, Any]) -> Optional[ModelT]:
        """Apply `changes` to an existing row. Returns None if it does not exist."""
        record = await self.get(record_id)
        if record is None:
            return None
        for field, value in changes.items():
            setattr(record, field, value)
        try:
            await self.session.flush()
            await self.session.refresh(record)
        except SQLAlchemyError as e:
            await self._fail("update", e)
        return record

    async def delete(self, record_id: Any) -> bool:
        """Delete a row. Returns False if it does not exist."""
        record = await self.get(record_id)
        if record is None:
            return False
        try:
            await self.session.delete(record)
            await self.session.flush()
        except SQLAlchemyError as e:
            await self._fail("delete", e)
        return True

    async def _fail(self, operation: str, error: SQLAlchemyError) -> None:
        logger.error(
            "Database error during %s %s: %s",
            self.resource_name,
            operation,
            str(error),
        )
        await self.session.rollback()
        raise DatabaseError(
            message=f"Could not {operation} the {self.resource_name}. Please try again.",
            context={"operation": operation, "error_type": type(error).__name__},
        ) from error

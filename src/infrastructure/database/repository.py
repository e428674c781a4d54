"""Generic async repository with the CRUD operations shared by all tables."""

from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy import delete as sql_delete
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.base import BaseModel


class BaseRepository[T: BaseModel]:
    """CRUD operations for one model class.

    Changes are flushed, never committed; the session owner decides when the
    unit of work ends.

    Args:
        session: The async SQLAlchemy session to use for operations.
        model_class: The SQLAlchemy model class this repository manages.

    Example:
        class OrderRepository(BaseRepository[Order]):
            def __init__(self, session: AsyncSession) -> None:
                super().__init__(session, Order)
    """

    def __init__(self, session: AsyncSession, model_class: type[T]) -> None:
        self.session = session
        self.model_class = model_class

    async def get_by_id(self, entity_id: int) -> T | None:
        """Retrieve a row by primary key.

        Args:
            entity_id: The primary key ID of the model to retrieve.

        Returns:
            T | None: The model instance if found, None otherwise.
        """
        stmt = select(self.model_class).where(self.model_class.id == entity_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, obj: T) -> T:
        """Insert a row and load its server-generated values.

        Args:
            obj: The model instance to create.

        Returns:
            T: The created model instance with populated ID and timestamps.
        """
        self.session.add(obj)
        await self.session.flush()
        await self.session.refresh(obj)

        logger.info(
            "Created {} instance with ID: {}", self.model_class.__name__, obj.id
        )
        return obj

    async def update(self, entity_id: int, data: Mapping[str, object]) -> T | None:
        """Apply a partial update.

        Args:
            entity_id: The primary key ID of the model to update.
            data: Column values to set. Unknown keys are ignored with a warning.

        Returns:
            T | None: The updated model instance if found, None otherwise.
        """
        instance = await self.get_by_id(entity_id)
        if instance is None:
            return None

        for key, value in data.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
            else:
                logger.warning(
                    "Attempted to update non-existent field '{}' on {}",
                    key,
                    self.model_class.__name__,
                )

        await self.session.flush()
        await self.session.refresh(instance)

        logger.info(
            "Updated {} instance ID {} - fields: {}",
            self.model_class.__name__,
            entity_id,
            list(data.keys()),
        )
        return instance

    async def delete(self, entity_id: int) -> bool:
        """Delete a row by primary key.

        Returns:
            bool: True if a row was deleted, False if none matched.
        """
        stmt = sql_delete(self.model_class).where(self.model_class.id == entity_id)
        result = await self.session.execute(stmt)
        deleted = result.rowcount > 0
        if deleted:
            logger.info(
                "Deleted {} instance with ID: {}", self.model_class.__name__, entity_id
            )
        return deleted

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator[None]:
        """Run the enclosed writes inside a SAVEPOINT.

        An exception rolls back only those writes and leaves the session
        usable for the rest of the unit of work; the exception is re-raised.
        """
        async with self.session.begin_nested():
            yield

    async def find_one_by(self, **kwargs: object) -> T | None:
        """Find the first row whose columns equal the given values.

        Args:
            **kwargs: Column-value pairs to filter by.

        Returns:
            T | None: The first matching instance, by ID, if any.
        """
        stmt = select(self.model_class)
        for field, value in kwargs.items():
            stmt = stmt.where(getattr(self.model_class, field) == value)
        stmt = stmt.order_by(self.model_class.id).limit(1)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

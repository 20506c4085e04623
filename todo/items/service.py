"""Item persistence service."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from todo.core.exceptions import StorageError
from todo.core.logging import get_logger, log_with_context
from todo.items.models import Item
from todo.items.schemas import ItemCreate

logger = get_logger(__name__)


class ItemService:
    """Service class for reading and appending items."""

    @staticmethod
    async def list_all(db: AsyncSession) -> list[Item]:
        """Get every item in insertion order.

        Args:
            db: The database session.

        Returns:
            All stored items, ordered by id.

        Raises:
            StorageError: If the query fails.
        """
        try:
            result = await db.execute(select(Item).order_by(Item.id))
        except SQLAlchemyError as e:
            logger.error("Failed to list items: %s", e)
            raise StorageError("Failed to load items") from e
        return list(result.scalars().all())

    @staticmethod
    async def create(db: AsyncSession, data: ItemCreate) -> Item:
        """Append a new item.

        The row is flushed so the database assigns its id; committing is
        left to the caller.

        Args:
            db: The database session.
            data: The item creation data.

        Returns:
            The created item.

        Raises:
            StorageError: If the insert fails.
        """
        item = Item(text=data.text)
        db.add(item)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to save item: %s", e)
            raise StorageError("Failed to save item") from e
        log_with_context(logger, logging.INFO, "Item saved", item_id=item.id)
        return item

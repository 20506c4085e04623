"""Item SQLAlchemy model."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from todo.db.base import Base

# Width of the items.item column
ITEM_TEXT_MAX_LENGTH = 255


class Item(Base):
    """A single todo entry.

    The text lives in a column named ``item``; ``id`` is assigned by the
    database on insert.
    """

    __tablename__ = "items"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    text: Mapped[str | None] = mapped_column(
        "item",
        String(ITEM_TEXT_MAX_LENGTH),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, text={self.text!r})>"

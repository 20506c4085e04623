"""Pydantic schemas for items."""

from pydantic import BaseModel, ConfigDict, field_validator

from todo.items.models import ITEM_TEXT_MAX_LENGTH


class ItemCreate(BaseModel):
    """Schema for a new item. Any text is accepted, including the empty string."""

    text: str = ""

    @field_validator("text", mode="after")
    @classmethod
    def fit_column(cls, v: str) -> str:
        """Cut text down to the column width instead of failing the insert."""
        return v[:ITEM_TEXT_MAX_LENGTH]


class ItemResponse(BaseModel):
    """Schema for a stored item."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    text: str | None

"""Items module - the todo list domain."""

from todo.items.models import Item
from todo.items.router import router

__all__ = ["Item", "router"]

"""CLI commands for inspecting and appending todo items."""

import asyncio
import selectors
import sys
from collections.abc import Coroutine
from typing import Any

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from todo.core.exceptions import StorageError
from todo.db.session import get_session_factory
from todo.items.schemas import ItemCreate
from todo.items.service import ItemService

console = Console()
error_console = Console(stderr=True)


def run_async(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run an async coroutine synchronously.

    On Windows, psycopg3 requires SelectorEventLoop instead of ProactorEventLoop.
    """
    if sys.platform == "win32":
        selector = selectors.SelectSelector()
        loop = asyncio.SelectorEventLoop(selector)
        try:
            return loop.run_until_complete(coro)
        finally:
            loop.close()
    else:
        return asyncio.run(coro)


def handle_db_error(e: Exception) -> None:
    """Handle database errors with user-friendly message."""
    error_console.print("[red]Error: Unable to reach the database.[/red]")
    error_console.print(f"[dim]Details: {e!s}[/dim]")
    raise typer.Exit(1) from None


app = typer.Typer(help="Inspect and add todo items")


@app.command("list")
def list_items() -> None:
    """List all items in insertion order."""

    async def _list() -> None:
        try:
            async with get_session_factory()() as db:
                items = await ItemService.list_all(db)
        except (SQLAlchemyError, StorageError) as e:
            handle_db_error(e)
            return

        if not items:
            console.print("[yellow]No items found.[/yellow]")
            return

        table = Table(title=f"Todo items ({len(items)} total)")
        table.add_column("ID", style="cyan", justify="right")
        table.add_column("Item")
        for item in items:
            table.add_row(str(item.id), item.text or "[dim](empty)[/dim]")
        console.print(table)

    run_async(_list())


@app.command("add")
def add_item(
    text: str = typer.Argument("", help="Text of the new item"),
) -> None:
    """Append a new item."""

    async def _add() -> None:
        try:
            async with get_session_factory()() as db:
                item = await ItemService.create(db, ItemCreate(text=text))
                await db.commit()
        except (SQLAlchemyError, StorageError) as e:
            handle_db_error(e)
            return

        console.print(f"[green]Saved item #{item.id}[/green]")

    run_async(_add())

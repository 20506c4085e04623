"""CLI module for application management."""

import typer
from sqlalchemy.exc import SQLAlchemyError

from todo.cli.items import app as items_app
from todo.cli.items import handle_db_error, run_async

app = typer.Typer(
    name="todo",
    help="Todo list - CLI management tool",
    no_args_is_help=True,
)

app.add_typer(items_app, name="items", help="Inspect and add todo items")


@app.command()
def serve(
    host: str | None = typer.Option(
        None, "--host", "-h", help="Host to bind to [default: SERVER_HOST]"
    ),
    port: int | None = typer.Option(
        None, "--port", "-p", help="Port to bind to [default: SERVER_PORT]"
    ),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """Start the web server."""
    import uvicorn

    from todo.config.settings import get_settings

    settings = get_settings()
    uvicorn.run(
        "todo.main:app",
        host=host or settings.server_host,
        port=port or settings.server_port,
        reload=reload,
    )


@app.command("init-db")
def init_db_command() -> None:
    """Create the items table if it does not exist."""
    from todo.db.session import init_db

    try:
        run_async(init_db())
    except SQLAlchemyError as e:
        handle_db_error(e)
    typer.echo("Database schema ready")


@app.command()
def version() -> None:
    """Show the application version."""
    from importlib.metadata import PackageNotFoundError, version as get_version

    try:
        ver = get_version("todo-list")
    except PackageNotFoundError:
        ver = "0.1.0 (development)"
    typer.echo(f"todo-list version {ver}")


if __name__ == "__main__":
    app()

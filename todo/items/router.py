"""Todo list pages."""

from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError
from sqlalchemy.ext.asyncio import AsyncSession

from todo.config.settings import Settings, get_settings
from todo.core.exceptions import RenderError
from todo.db.session import get_db
from todo.items.schemas import ItemCreate, ItemResponse
from todo.items.service import ItemService

LIST_PATH = "/"
SAVE_PATH = "/save"

templates = Jinja2Templates(directory=Path(__file__).parent / "templates")

router = APIRouter(tags=["items"])


@router.api_route(
    LIST_PATH,
    methods=["GET", "POST"],
    response_class=HTMLResponse,
    summary="List items",
)
async def todo_list(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> HTMLResponse:
    """Render every stored item along with the form for adding a new one."""
    items = await ItemService.list_all(db)
    try:
        return templates.TemplateResponse(
            request,
            "todo_list.html",
            {
                "items": [ItemResponse.model_validate(item) for item in items],
                "save_url": SAVE_PATH,
            },
        )
    except TemplateError as e:
        raise RenderError(details={"template": "todo_list.html"}) from e


@router.post(SAVE_PATH, summary="Save an item")
async def save_item(
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    item: Annotated[str, Form()] = "",
) -> RedirectResponse:
    """Save a new item, then redirect back to the list."""
    await ItemService.create(db, ItemCreate(text=item))
    # Durable before the client follows the redirect
    await db.commit()
    return RedirectResponse(url=LIST_PATH, status_code=settings.save_redirect_status)

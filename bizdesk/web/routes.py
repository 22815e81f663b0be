"""
Web page routes.

Each page renders inside layout.html; the data itself is loaded by the page
from the /api endpoints.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from bizdesk.auth.dependencies import AuthenticatedUser, get_optional_user
from bizdesk.web.layout import NAV_ITEMS, build_layout_context

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
STATIC_DIR = Path(__file__).parent / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(include_in_schema=False)

PAGES = {item.path.lstrip("/"): item.label for item in NAV_ITEMS}


@router.get("/")
async def home() -> RedirectResponse:
    return RedirectResponse(url="/dashboard", status_code=status.HTTP_302_FOUND)


@router.get("/{page}", response_class=HTMLResponse)
async def show_page(
    request: Request,
    page: str,
    user: Annotated[Optional[AuthenticatedUser], Depends(get_optional_user)],
) -> HTMLResponse:
    title = PAGES.get(page)
    if title is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "not_found", "details": f"Page '{page}' not found"}
        )

    logger.debug(f"Rendering page {page} (admin={bool(user and user.is_admin)})")

    context = {
        "page": page,
        "title": title,
        "appearance": getattr(request.state, "appearance", "system"),
        "shared": getattr(request.state, "shared", {}),
        **build_layout_context(user, request.url.path),
    }
    return templates.TemplateResponse(request, "pages/page.html", context)

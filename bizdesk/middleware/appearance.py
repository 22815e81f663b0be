"""Expose the visitor's colour-scheme preference to templates."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

APPEARANCE_COOKIE = "appearance"
APPEARANCES = ("light", "dark", "system")
DEFAULT_APPEARANCE = "system"


def resolve_appearance(value: str | None) -> str:
    return value if value in APPEARANCES else DEFAULT_APPEARANCE


class AppearanceMiddleware(BaseHTTPMiddleware):
    """Sets request.state.appearance from the 'appearance' cookie."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.appearance = resolve_appearance(request.cookies.get(APPEARANCE_COOKIE))
        return await call_next(request)

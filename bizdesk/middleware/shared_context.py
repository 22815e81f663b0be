"""
Per-request data shared with every web view.

request.state.shared holds:
- app_name: configured APP_NAME
- path: current request path (for highlighting the active nav item)
- sidebar_open: False only when the sidebar_state cookie is 'false'
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

SIDEBAR_COOKIE = "sidebar_state"


class ShareRequestContextMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, app_name: str):
        super().__init__(app)
        self.app_name = app_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        sidebar_state = request.cookies.get(SIDEBAR_COOKIE)
        request.state.shared = {
            "app_name": self.app_name,
            "path": request.url.path,
            "sidebar_open": sidebar_state != "false",
        }
        return await call_next(request)

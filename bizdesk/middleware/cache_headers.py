"""
HTTP cache headers for API responses.

GET responses under a cacheable prefix get a public max-age; other GETs must
revalidate; writes are never stored. Prefixes are matched against the request
path without its leading slash, e.g. 'api/categories/4'.

Cacheable prefixes:
    api/categories  300s  (rarely change)
    api/products     30s
    api/inventories  20s
    api/dashboard    30s  (aggregates)
"""

from typing import Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

CACHEABLE_ROUTES: Dict[str, int] = {
    "api/categories": 300,
    "api/products": 30,
    "api/inventories": 20,
    "api/dashboard": 30,
}


def cache_duration(path: str, routes: Dict[str, int] = CACHEABLE_ROUTES) -> int:
    """Seconds a GET response for ``path`` may be cached (0 = not cacheable)."""
    path = path.lstrip("/")
    for prefix, duration in routes.items():
        if path.startswith(prefix):
            return duration
    return 0


class SetCacheHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, routes: Optional[Dict[str, int]] = None):
        super().__init__(app)
        self.routes = routes if routes is not None else CACHEABLE_ROUTES

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)

        if request.method == "GET":
            duration = cache_duration(request.url.path, self.routes)
            if duration > 0:
                response.headers["Cache-Control"] = f"public, max-age={duration}, s-maxage={duration}"
                response.headers["X-Cache-Status"] = "CACHEABLE"
                response.headers["X-Cache-Duration"] = str(duration)
            else:
                response.headers["Cache-Control"] = "no-cache, must-revalidate"
                response.headers["X-Cache-Status"] = "NO-CACHE"
        else:
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
            response.headers["X-Cache-Status"] = "NO-STORE"

        return response

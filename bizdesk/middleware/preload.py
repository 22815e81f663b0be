"""Announce static assets through a Link preload header on HTML pages."""

from typing import Iterable, List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

AS_BY_EXTENSION = {
    ".css": "style",
    ".js": "script",
    ".mjs": "script",
    ".woff": "font",
    ".woff2": "font",
}


def preload_link(asset: str) -> str:
    extension = asset[asset.rfind("."):].lower() if "." in asset else ""
    link = f"<{asset}>; rel=preload"
    as_value = AS_BY_EXTENSION.get(extension)
    if as_value:
        link += f"; as={as_value}"
    if as_value == "font":
        link += "; crossorigin"
    return link


def build_link_header(assets: Iterable[str]) -> str:
    return ", ".join(preload_link(asset) for asset in assets)


class PreloadLinksMiddleware(BaseHTTPMiddleware):
    """Adds Link to text/html responses that don't already carry one."""

    def __init__(self, app: ASGIApp, assets: List[str]):
        super().__init__(app)
        self.link_header = build_link_header(assets)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)

        content_type = response.headers.get("content-type", "")
        if self.link_header and content_type.startswith("text/html") and "link" not in response.headers:
            response.headers["Link"] = self.link_header

        return response

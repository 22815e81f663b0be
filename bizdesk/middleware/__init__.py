"""HTTP middleware for the web pages and the mounted API app."""

from .appearance import AppearanceMiddleware
from .cache_headers import SetCacheHeadersMiddleware
from .cookies import EncryptCookiesMiddleware
from .preload import PreloadLinksMiddleware
from .registry import MiddlewareConfig, api_middleware, apply_middleware, web_middleware
from .shared_context import ShareRequestContextMiddleware

__all__ = [
    "AppearanceMiddleware",
    "EncryptCookiesMiddleware",
    "MiddlewareConfig",
    "PreloadLinksMiddleware",
    "SetCacheHeadersMiddleware",
    "ShareRequestContextMiddleware",
    "api_middleware",
    "apply_middleware",
    "web_middleware",
]

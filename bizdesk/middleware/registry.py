"""
Declarative middleware registration.

Two groups, mirroring the two ASGI apps in bizdesk.main:

web (HTML pages):
    EncryptCookiesMiddleware      except appearance, sidebar_state
    AppearanceMiddleware
    ShareRequestContextMiddleware
    PreloadLinksMiddleware

api (mounted at /api):
    GZipMiddleware                > 1 KB, level 6
    SetCacheHeadersMiddleware

Entries are listed outermost first.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware

from bizdesk.config import Settings, settings as default_settings
from bizdesk.middleware.appearance import AppearanceMiddleware
from bizdesk.middleware.cache_headers import SetCacheHeadersMiddleware
from bizdesk.middleware.cookies import ENCRYPT_COOKIES_EXCEPT, EncryptCookiesMiddleware
from bizdesk.middleware.preload import PreloadLinksMiddleware
from bizdesk.middleware.shared_context import ShareRequestContextMiddleware

logger = logging.getLogger(__name__)

GZIP_MINIMUM_SIZE = 1024
GZIP_LEVEL = 6


@dataclass(frozen=True)
class MiddlewareConfig:
    """One middleware class plus the keyword options it is built with."""
    cls: type
    options: Dict[str, Any] = field(default_factory=dict)


def web_middleware(config: Settings = default_settings) -> List[MiddlewareConfig]:
    return [
        MiddlewareConfig(
            EncryptCookiesMiddleware,
            {"app_key": config.APP_KEY, "except_cookies": ENCRYPT_COOKIES_EXCEPT},
        ),
        MiddlewareConfig(AppearanceMiddleware),
        MiddlewareConfig(ShareRequestContextMiddleware, {"app_name": config.APP_NAME}),
        MiddlewareConfig(PreloadLinksMiddleware, {"assets": config.PRELOAD_ASSETS}),
    ]


def api_middleware() -> List[MiddlewareConfig]:
    return [
        MiddlewareConfig(GZipMiddleware, {"minimum_size": GZIP_MINIMUM_SIZE, "compresslevel": GZIP_LEVEL}),
        MiddlewareConfig(SetCacheHeadersMiddleware),
    ]


def apply_middleware(app: FastAPI, entries: Sequence[MiddlewareConfig]) -> None:
    """
    Register ``entries`` on ``app`` so the first entry ends up outermost.

    add_middleware() wraps the existing stack, so entries are added in
    reverse order.
    """
    for entry in reversed(entries):
        app.add_middleware(entry.cls, **entry.options)
        logger.debug(f"Registered {entry.cls.__name__} on {app.title}")

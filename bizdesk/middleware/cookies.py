"""
Cookie encryption for web routes.

Incoming cookies are decrypted before the request reaches the app and
outgoing Set-Cookie values are encrypted on the way out. Cookies listed in
ENCRYPT_COOKIES_EXCEPT travel in plain text so client-side code can read
them (theme and sidebar state).

Keys are Fernet keys derived from APP_KEY. A Laravel-style 'base64:' key
(32 random bytes, standard base64) is accepted and converted.
"""

import base64
import logging
from http.cookies import SimpleCookie
from typing import Iterable, List, Optional, Tuple

from cryptography.fernet import Fernet, InvalidToken
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

ENCRYPT_COOKIES_EXCEPT: Tuple[str, ...] = ("appearance", "sidebar_state")


def fernet_from_app_key(app_key: str) -> Fernet:
    """
    Build a Fernet instance from APP_KEY.

    Raises:
        ValueError: If APP_KEY is empty or not a usable key
    """
    if not app_key:
        raise ValueError("APP_KEY is not configured. Cannot encrypt cookies.")

    if app_key.startswith("base64:"):
        raw = base64.b64decode(app_key[len("base64:"):])
        return Fernet(base64.urlsafe_b64encode(raw))

    return Fernet(app_key.encode())


def is_disabled(name: str, except_cookies: Iterable[str] = ENCRYPT_COOKIES_EXCEPT) -> bool:
    """True when the cookie is sent without encryption."""
    return name in except_cookies


class CookieEncrypter:
    """Encrypts/decrypts single cookie values."""

    def __init__(self, app_key: str):
        self._fernet = fernet_from_app_key(app_key)

    def encrypt(self, value: str) -> str:
        return self._fernet.encrypt(value.encode()).decode()

    def decrypt(self, value: str) -> Optional[str]:
        """Return the plain value, or None if it was not encrypted with our key."""
        try:
            return self._fernet.decrypt(value.encode()).decode()
        except (InvalidToken, ValueError):
            return None


class EncryptCookiesMiddleware(BaseHTTPMiddleware):
    """
    Decrypt request cookies and encrypt response cookies.

    Cookies that fail to decrypt are dropped from the request, so tampered
    or foreign values never reach the handlers.
    """

    def __init__(
        self,
        app: ASGIApp,
        app_key: str,
        except_cookies: Iterable[str] = ENCRYPT_COOKIES_EXCEPT,
    ):
        super().__init__(app)
        self.encrypter = CookieEncrypter(app_key)
        self.except_cookies = tuple(except_cookies)

    def decrypt_cookies(self, cookies: dict) -> List[Tuple[str, str]]:
        plain = []
        for name, value in cookies.items():
            if is_disabled(name, self.except_cookies):
                plain.append((name, value))
                continue
            decrypted = self.encrypter.decrypt(value)
            if decrypted is None:
                logger.info(f"Dropping cookie '{name}' that failed to decrypt")
                continue
            plain.append((name, decrypted))
        return plain

    def encrypt_set_cookie(self, header: str) -> str:
        name, _, rest = header.partition("=")
        value, sep, attributes = rest.partition(";")
        name = name.strip()
        # Values with separators arrive quoted with octal escapes ("a\054b")
        value, _ = SimpleCookie().value_decode(value.strip())

        if not value or is_disabled(name, self.except_cookies):
            return header

        return f"{name}={self.encrypter.encrypt(value)}{sep}{attributes}"

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.cookies:
            plain = self.decrypt_cookies(request.cookies)
            headers = [(k, v) for k, v in request.scope["headers"] if k != b"cookie"]
            if plain:
                # Re-quote so values holding ";" or "," parse back intact
                quoter = SimpleCookie()
                cookie_header = "; ".join(f"{name}={quoter.value_encode(value)[1]}" for name, value in plain)
                headers.append((b"cookie", cookie_header.encode("latin-1")))
            request.scope["headers"] = headers

        response = await call_next(request)

        response.raw_headers[:] = [
            (key, self.encrypt_set_cookie(value.decode("latin-1")).encode("latin-1"))
            if key == b"set-cookie" else (key, value)
            for key, value in response.raw_headers
        ]

        return response

"""
Configured HTTP client for the BizDesk REST API.

Every resource service in this package takes the client returned by
create_api_client() as its first argument and performs exactly one request
with it. The client carries the base URL and JSON default headers; it does
not retry, and it never rewrites responses.
"""

import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from bizdesk.config import settings

logger = logging.getLogger(__name__)

DEFAULT_HEADERS: Dict[str, str] = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

# Marker stored by the web login flow when the session cookie carries auth
SESSION_BASED_TOKEN = "session_based"


async def _log_unauthorized(response: httpx.Response) -> None:
    """Response hook: note rejected credentials, leave the response untouched."""
    if response.status_code == httpx.codes.UNAUTHORIZED:
        logger.warning(
            f"Unauthorized response for {response.request.method} {response.request.url.path}"
        )


def build_headers(
    token: Optional[str] = None,
    extra_headers: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Build the default request headers.

    Args:
        token: Optional bearer token. The session marker is never sent.
        extra_headers: Headers merged over the defaults.

    Returns:
        Header dict for httpx.AsyncClient.
    """
    headers = dict(DEFAULT_HEADERS)
    if token and token != SESSION_BASED_TOKEN:
        headers["Authorization"] = f"Bearer {token}"
    if extra_headers:
        headers.update(extra_headers)
    return headers


def create_api_client(
    base_url: Optional[str] = None,
    token: Optional[str] = None,
    extra_headers: Optional[Mapping[str, str]] = None,
    **client_kwargs: Any,
) -> httpx.AsyncClient:
    """
    Create the async HTTP client shared by all resource services.

    Args:
        base_url: API root (defaults to settings.API_BASE_URL)
        token: Optional bearer token for authenticated endpoints
        extra_headers: Additional default headers
        **client_kwargs: Passed through to httpx.AsyncClient (e.g. transport, timeout)

    Returns:
        httpx.AsyncClient configured for the API

    Usage:
        >>> async with create_api_client() as api:
        ...     departments = await get_departments(api)
    """
    resolved_base_url = (base_url or settings.API_BASE_URL).rstrip("/")

    logger.debug(f"Creating API client for {resolved_base_url}")

    return httpx.AsyncClient(
        base_url=resolved_base_url,
        headers=build_headers(token, extra_headers),
        event_hooks={"response": [_log_unauthorized]},
        **client_kwargs,
    )


def unwrap(response: httpx.Response) -> Any:
    """
    Return the decoded body of a successful response.

    Non-2xx responses raise httpx.HTTPStatusError unchanged. An empty body
    decodes to None.
    """
    response.raise_for_status()
    if not response.content:
        return None
    return response.json()

"""
FastAPI dependency functions for authentication.

Tokens are issued by Supabase Auth (login lives outside this service) and
verified here against the project's JWT Signing Keys (ES256, JWKS).

The shop role ('admin' or 'staff') is read from the token's app_metadata.
Admins get the full navigation shell; staff only see page content.
"""

import logging
from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, Optional

from fastapi import Header, HTTPException, Request, status
from jwt import PyJWKClient, decode
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError, PyJWKClientError

from bizdesk.config import settings

logger = logging.getLogger(__name__)

# Cookie the web login flow stores the access token in (encrypted by the web middleware)
AUTH_COOKIE = "auth_token"

_jwks_client: PyJWKClient | None = None


@dataclass
class AuthenticatedUser:
    """
    Represents an authenticated user with their token.

    Attributes:
        user_id: The user's UUID from the JWT token's 'sub' claim
        access_token: The full JWT access token
        role: Shop role from app_metadata ('admin', 'staff', ...)
        name: Display name from user_metadata, when present
        email: Email claim, when present
    """
    user_id: str
    access_token: str
    role: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        return (self.role or "").lower() == "admin"

    @property
    def is_staff(self) -> bool:
        return (self.role or "").lower() == "staff"


def get_jwks_client() -> PyJWKClient:
    """
    Get or create the JWKS client instance.

    Lazy initialization ensures we only create the client when needed.
    The client caches JWKS responses to minimize network calls.

    Raises:
        ValueError: If SUPABASE_URL is not configured
    """
    global _jwks_client

    if _jwks_client is None:
        jwks_url = settings.SUPABASE_JWKS_URL
        if not jwks_url:
            raise ValueError(
                "SUPABASE_URL is not configured. "
                "Cannot construct JWKS URL for JWT verification."
            )

        logger.info(f"Initializing JWKS client with URL: {jwks_url}")
        _jwks_client = PyJWKClient(
            jwks_url,
            cache_keys=True,
            max_cached_keys=16,
        )

    return _jwks_client


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify a Supabase access token and return its claims.

    Raises:
        ExpiredSignatureError, InvalidTokenError, PyJWKClientError: On failure
    """
    jwks_client = get_jwks_client()
    signing_key = jwks_client.get_signing_key_from_jwt(token)

    # Supabase tokens use an issuer that includes the /auth/v1 path
    issuer = f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1"

    return decode(
        token,
        signing_key.key,
        algorithms=["ES256"],
        audience="authenticated",
        issuer=issuer,
        options={
            "verify_signature": True,
            "verify_exp": True,
            "verify_aud": True,
            "verify_iss": True,
        }
    )


def user_from_claims(token: str, payload: Dict[str, Any]) -> AuthenticatedUser:
    """
    Build an AuthenticatedUser from verified token claims.

    Raises:
        InvalidTokenError: If the 'sub' claim is missing
    """
    user_id = payload.get("sub")
    if not user_id:
        raise InvalidTokenError("Token payload missing 'sub' claim")

    app_metadata = payload.get("app_metadata") or {}
    user_metadata = payload.get("user_metadata") or {}

    return AuthenticatedUser(
        user_id=str(user_id),
        access_token=token,
        role=app_metadata.get("role") or user_metadata.get("role"),
        name=user_metadata.get("name"),
        email=payload.get("email"),
        metadata=user_metadata,
    )


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


async def get_authenticated_user(
    authorization: Annotated[str | None, Header()] = None
) -> AuthenticatedUser:
    """
    Verify the Bearer token and return the authenticated user.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired

    Usage:
        @router.get("/user")
        async def current_user(
            auth_user: AuthenticatedUser = Depends(get_authenticated_user)
        ):
            ...
    """
    if not authorization:
        logger.warning("Missing Authorization header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "unauthorized", "details": "Missing Authorization header"}
        )

    token = _bearer_token(authorization)
    if not token:
        logger.warning("Invalid Authorization header format")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "unauthorized", "details": "Invalid Authorization header format"}
        )

    try:
        payload = decode_access_token(token)
        user = user_from_claims(token, payload)
        logger.info(f"Token verified successfully for user_id={user.user_id}")
        return user

    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "token_expired", "details": "Authentication token has expired"}
        )

    except PyJWKClientError as e:
        logger.error(f"JWKS client error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "jwks_error", "details": "Unable to verify token signature"}
        )

    except InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "invalid_token", "details": "Invalid authentication token"}
        )


async def get_optional_user(request: Request) -> Optional[AuthenticatedUser]:
    """
    Resolve the current user if a valid token is present, else None.

    Looks at the Authorization header first, then the auth_token cookie
    (already decrypted by the cookie middleware on web routes). Never raises
    for a bad token; the caller decides what anonymous access means.
    """
    token = _bearer_token(request.headers.get("authorization")) or request.cookies.get(AUTH_COOKIE)
    if not token:
        return None

    try:
        return user_from_claims(token, decode_access_token(token))
    except (InvalidTokenError, PyJWKClientError, ValueError) as e:
        logger.info(f"Ignoring unusable token on {request.url.path}: {type(e).__name__}")
        return None

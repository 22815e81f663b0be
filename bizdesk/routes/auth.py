"""
Auth API endpoints.

- GET /user - Identity of the bearer of the access token

Login and token issuance happen in Supabase Auth, not here.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from bizdesk.auth.dependencies import AuthenticatedUser, get_authenticated_user
from bizdesk.schemas.auth import CurrentUserResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.get(
    "/user",
    response_model=CurrentUserResponse,
    summary="Get authenticated user",
    description="Returns the caller's identity and shop role. 401 without a valid Bearer token.",
)
async def current_user(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> CurrentUserResponse:
    logger.info(f"Current user requested: user_id={auth_user.user_id}")

    return CurrentUserResponse(
        user_id=auth_user.user_id,
        email=auth_user.email,
        name=auth_user.name,
        role=auth_user.role,
        is_admin=auth_user.is_admin,
        metadata=auth_user.metadata,
    )

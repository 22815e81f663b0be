"""Tests for token claims and optional user resolution."""

from unittest.mock import MagicMock, patch

import pytest
from jwt.exceptions import InvalidTokenError

from bizdesk.auth.dependencies import AUTH_COOKIE, get_optional_user, user_from_claims

CLAIMS = {
    "sub": "b7c1d2e3-0000-4000-8000-000000000001",
    "email": "maria@example.com",
    "app_metadata": {"role": "admin"},
    "user_metadata": {"name": "Maria Santos"},
}


def make_request(headers=None, cookies=None):
    request = MagicMock()
    request.headers = headers or {}
    request.cookies = cookies or {}
    request.url.path = "/dashboard"
    return request


class TestUserFromClaims:

    def test_role_from_app_metadata(self):
        user = user_from_claims("token", CLAIMS)

        assert user.user_id == CLAIMS["sub"]
        assert user.role == "admin"
        assert user.is_admin is True
        assert user.name == "Maria Santos"
        assert user.email == "maria@example.com"

    def test_role_falls_back_to_user_metadata(self):
        user = user_from_claims("token", {"sub": "u1", "user_metadata": {"role": "staff"}})

        assert user.is_staff is True
        assert user.is_admin is False

    def test_missing_sub(self):
        with pytest.raises(InvalidTokenError):
            user_from_claims("token", {"email": "x@example.com"})


class TestGetOptionalUser:

    @pytest.mark.asyncio
    async def test_no_token(self):
        assert await get_optional_user(make_request()) is None

    @pytest.mark.asyncio
    @patch("bizdesk.auth.dependencies.decode_access_token")
    async def test_bearer_header(self, mock_decode):
        mock_decode.return_value = CLAIMS

        user = await get_optional_user(make_request(headers={"authorization": "Bearer abc"}))

        mock_decode.assert_called_once_with("abc")
        assert user.is_admin is True

    @pytest.mark.asyncio
    @patch("bizdesk.auth.dependencies.decode_access_token")
    async def test_auth_cookie(self, mock_decode):
        mock_decode.return_value = CLAIMS

        user = await get_optional_user(make_request(cookies={AUTH_COOKIE: "from-cookie"}))

        mock_decode.assert_called_once_with("from-cookie")
        assert user.user_id == CLAIMS["sub"]

    @pytest.mark.asyncio
    @patch("bizdesk.auth.dependencies.decode_access_token")
    async def test_bad_token_is_anonymous(self, mock_decode):
        mock_decode.side_effect = InvalidTokenError("bad signature")

        assert await get_optional_user(make_request(headers={"authorization": "Bearer abc"})) is None

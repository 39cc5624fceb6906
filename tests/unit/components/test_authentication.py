"""Tests for bearer token authentication."""

from __future__ import annotations

from typing import Any

import pytest

from middleware_lab.component import ComponentCategory
from middleware_lab.components.authentication import BearerAuthentication, TokenDirectory
from middleware_lab.demo_data import DEMO_USERS
from middleware_lab.exceptions import AuthenticationFailed


@pytest.fixture
def auth() -> BearerAuthentication:
    return BearerAuthentication(TokenDirectory(DEMO_USERS).lookup)


class TestTokenDirectory:
    async def test_lookup_known_token(self) -> None:
        directory = TokenDirectory(DEMO_USERS)
        user = await directory.lookup("admin-token-456")
        assert user is not None
        assert user.name == "Jane Admin"
        assert user.role == "admin"

    async def test_lookup_unknown_token(self) -> None:
        assert await TokenDirectory(DEMO_USERS).lookup("nope") is None

    async def test_is_a_snapshot(self) -> None:
        source = dict(DEMO_USERS)
        directory = TokenDirectory(source)
        source.clear()
        user = await directory.lookup("user-token-123")
        assert user is not None
        assert user.name == "John Doe"


class TestBearerAuthentication:
    def test_category(self, auth: BearerAuthentication) -> None:
        assert auth.category == ComponentCategory.AUTHENTICATION

    async def test_header_with_bearer_prefix(self, auth: BearerAuthentication, make_ctx: Any) -> None:
        ctx = make_ctx(headers={"Authorization": "Bearer user-token-123"})
        await auth.resolve(ctx)
        assert ctx.user is not None
        assert ctx.user.name == "John Doe"

    async def test_header_without_prefix(self, auth: BearerAuthentication, make_ctx: Any) -> None:
        ctx = make_ctx(headers={"Authorization": "demo-token-789"})
        await auth.resolve(ctx)
        assert ctx.user is not None
        assert ctx.user.role == "demo"

    async def test_query_parameter(self, auth: BearerAuthentication, make_ctx: Any) -> None:
        ctx = make_ctx(query_string="token=admin-token-456")
        await auth.resolve(ctx)
        assert ctx.user is not None
        assert ctx.user.role == "admin"

    async def test_header_wins_over_query(self, auth: BearerAuthentication, make_ctx: Any) -> None:
        ctx = make_ctx(
            headers={"Authorization": "Bearer user-token-123"},
            query_string="token=admin-token-456",
        )
        await auth.resolve(ctx)
        assert ctx.user is not None
        assert ctx.user.role == "user"

    async def test_missing_token(self, auth: BearerAuthentication, make_ctx: Any) -> None:
        ctx = make_ctx()
        with pytest.raises(AuthenticationFailed) as exc_info:
            await auth.resolve(ctx)
        payload = exc_info.value.payload()
        assert payload["error"] == "Authentication required"
        assert "hint" in payload
        assert ctx.user is None

    async def test_invalid_token(self, auth: BearerAuthentication, make_ctx: Any) -> None:
        ctx = make_ctx(headers={"Authorization": "Bearer forged"})
        with pytest.raises(AuthenticationFailed) as exc_info:
            await auth.resolve(ctx)
        assert exc_info.value.status_code == 401
        assert exc_info.value.payload()["error"] == "Invalid token"

    async def test_empty_bearer(self, auth: BearerAuthentication, make_ctx: Any) -> None:
        ctx = make_ctx(headers={"Authorization": "Bearer "})
        with pytest.raises(AuthenticationFailed) as exc_info:
            await auth.resolve(ctx)
        assert exc_info.value.payload()["error"] == "Authentication required"

    def test_openapi_spec(self, auth: BearerAuthentication) -> None:
        spec = auth.openapi_spec()
        assert spec is not None
        assert "BearerToken" in spec["security_schemes"]
        assert "401" in spec["responses"]

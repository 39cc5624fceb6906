"""Tests for role authorization."""

from __future__ import annotations

from typing import Any

import pytest

from middleware_lab.component import ComponentCategory
from middleware_lab.components.permissions import HasRole
from middleware_lab.demo_data import ADMIN_PERMISSIONS, DEMO_USERS
from middleware_lab.exceptions import (
    AuthenticationFailed,
    FlowConfigurationError,
    PermissionDenied,
)
from middleware_lab.flow import Flow


class TestHasRole:
    def test_category_and_requirement(self) -> None:
        comp = HasRole()
        assert comp.category == ComponentCategory.PERMISSION
        assert ComponentCategory.AUTHENTICATION in comp.requires

    def test_flow_without_authentication_rejected(self) -> None:
        with pytest.raises(FlowConfigurationError):
            Flow(HasRole()).resolve()

    async def test_admin_granted(self, make_ctx: Any) -> None:
        ctx = make_ctx()
        ctx.user = DEMO_USERS["admin-token-456"]
        await HasRole("admin", ADMIN_PERMISSIONS).resolve(ctx)
        assert ctx.admin is not None
        assert ctx.admin.is_admin
        assert ctx.admin.permissions == ADMIN_PERMISSIONS

    async def test_non_admin_denied(self, make_ctx: Any) -> None:
        ctx = make_ctx()
        ctx.user = DEMO_USERS["user-token-123"]
        with pytest.raises(PermissionDenied) as exc_info:
            await HasRole().resolve(ctx)
        payload = exc_info.value.payload()
        assert payload["error"] == "Insufficient privileges"
        assert payload["user"] == {
            "name": "John Doe",
            "role": "user",
            "requiredRole": "admin",
        }
        assert ctx.admin is None

    async def test_no_user_is_unauthenticated(self, make_ctx: Any) -> None:
        with pytest.raises(AuthenticationFailed):
            await HasRole().resolve(make_ctx())

    def test_openapi_spec(self) -> None:
        spec = HasRole("admin").openapi_spec()
        assert spec is not None
        assert spec["x-roles"] == ["admin"]
        assert "403" in spec["responses"]

"""Tests for the session manager and flash messages."""

from __future__ import annotations

from typing import Any

import pytest

from middleware_lab.component import ComponentCategory
from middleware_lab.components.sessions import (
    FLASH_KEY,
    SESSION_ID_KEY,
    FlashMessages,
    SessionAction,
    SessionManager,
)
from middleware_lab.exceptions import FlowConfigurationError


async def _run(action: SessionAction, session: dict[str, Any], make_ctx: Any) -> Any:
    ctx = make_ctx(session=session)
    await SessionManager(action).resolve(ctx)
    return ctx


class TestFlashMessages:
    def test_consumes_previous(self) -> None:
        session: dict[str, Any] = {FLASH_KEY: {"info": "hello"}}
        flashes = FlashMessages(session)
        assert flashes.get("info") == "hello"
        assert FLASH_KEY not in session

    def test_new_flash_is_for_next_request(self) -> None:
        session: dict[str, Any] = {}
        flashes = FlashMessages(session)
        flashes.flash("success", "done")
        assert flashes.get("success") is None
        assert session[FLASH_KEY] == {"success": "done"}

    def test_snapshot_lists_every_kind(self) -> None:
        snapshot = FlashMessages({FLASH_KEY: {"error": "x"}}).snapshot()
        assert snapshot["error"] == "x"
        assert snapshot["cart_message"] is None


class TestSessionManager:
    def test_category(self) -> None:
        assert SessionManager(SessionAction.READ).category == ComponentCategory.STATE

    async def test_requires_session_middleware(self, make_ctx: Any) -> None:
        with pytest.raises(FlowConfigurationError):
            await SessionManager(SessionAction.READ).resolve(make_ctx())

    async def test_assigns_session_id(self, make_ctx: Any) -> None:
        session: dict[str, Any] = {}
        ctx = await _run(SessionAction.READ, session, make_ctx)
        assert ctx.session.id == session[SESSION_ID_KEY]
        again = await _run(SessionAction.READ, session, make_ctx)
        assert again.session.id == ctx.session.id

    async def test_init(self, make_ctx: Any) -> None:
        session: dict[str, Any] = {"visit_count": 2}
        ctx = await _run(SessionAction.INIT, session, make_ctx)
        assert session["user"]["name"] == "John Doe"
        assert session["user"]["preferences"]["theme"] == "dark"
        assert ctx.session.visit_count == 3
        assert ctx.session.last_visit is not None

    async def test_shopping_cart(self, make_ctx: Any) -> None:
        session: dict[str, Any] = {}
        await _run(SessionAction.SHOPPING_CART, session, make_ctx)
        ctx = await _run(SessionAction.SHOPPING_CART, session, make_ctx)
        assert ctx.session.cart_items == 2
        assert "cart_updated_at" in session
        # Flash from the first request is visible on the second
        assert ctx.session.flash_messages["cart_message"].startswith("Added Session Product")

    async def test_flash_visible_once(self, make_ctx: Any) -> None:
        session: dict[str, Any] = {}
        ctx = await _run(SessionAction.FLASH, session, make_ctx)
        assert ctx.session.flash_messages["success"] is None

        ctx = await _run(SessionAction.READ, session, make_ctx)
        assert ctx.session.flash_messages["success"] == "Operation completed successfully!"
        assert ctx.session.flash_messages["warning"] == "This is a warning message"

        ctx = await _run(SessionAction.READ, session, make_ctx)
        assert ctx.session.flash_messages["success"] is None

    async def test_update_preferences_toggles_theme(self, make_ctx: Any) -> None:
        session: dict[str, Any] = {}
        await _run(SessionAction.INIT, session, make_ctx)
        await _run(SessionAction.UPDATE_PREFERENCES, session, make_ctx)
        assert session["user"]["preferences"]["theme"] == "light"
        assert session[FLASH_KEY]["success"] == "Preferences updated successfully!"

    async def test_update_preferences_without_user(self, make_ctx: Any) -> None:
        session: dict[str, Any] = {}
        await _run(SessionAction.UPDATE_PREFERENCES, session, make_ctx)
        assert session[FLASH_KEY] == {"error": "No user session found"}

    async def test_regenerate_keeps_data(self, make_ctx: Any) -> None:
        session: dict[str, Any] = {"cart": [{"price": 1, "quantity": 1}]}
        first = await _run(SessionAction.READ, session, make_ctx)
        second = await _run(SessionAction.REGENERATE, session, make_ctx)
        assert second.session.id != first.session.id
        assert second.session.cart_items == 1

    async def test_clear_cart(self, make_ctx: Any) -> None:
        session: dict[str, Any] = {"cart": [{}], "cart_updated_at": "now"}
        ctx = await _run(SessionAction.CLEAR_CART, session, make_ctx)
        assert ctx.session.cart_items == 0
        assert "cart_updated_at" not in session

    async def test_logout(self, make_ctx: Any) -> None:
        session: dict[str, Any] = {}
        await _run(SessionAction.INIT, session, make_ctx)
        ctx = await _run(SessionAction.LOGOUT, session, make_ctx)
        assert ctx.session.user is None
        assert ctx.session.visit_count == 0
        assert session[FLASH_KEY] == {"info": "You have been logged out"}
        assert SESSION_ID_KEY in session

    async def test_destroy(self, make_ctx: Any) -> None:
        session: dict[str, Any] = {"user": {"name": "x"}, FLASH_KEY: {"info": "i"}}
        ctx = await _run(SessionAction.DESTROY, session, make_ctx)
        assert session == {}
        assert ctx.session.id is None
        assert ctx.session.user is None

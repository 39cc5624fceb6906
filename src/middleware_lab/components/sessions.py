"""Session manager: flash messages and demo session actions.

Relies on Starlette's ``SessionMiddleware`` for storage; the session travels
in a signed cookie, so everything stored here must be JSON serializable.
"""

from __future__ import annotations

import enum
import logging
import random
import time
import uuid
from collections.abc import MutableMapping
from datetime import datetime, timezone
from typing import Any

from middleware_lab.component import ComponentCategory, FlowComponent
from middleware_lab.context import RequestContext
from middleware_lab.exceptions import FlowConfigurationError
from middleware_lab.models import SessionInfo

logger = logging.getLogger(__name__)

SESSION_ID_KEY = "_id"
FLASH_KEY = "_flash"
FLASH_KINDS = ("success", "info", "warning", "error", "cart_message")

USER_KEYS = ("user", "visit_count", "last_visit", "cart", "cart_updated_at")


class SessionAction(str, enum.Enum):
    INIT = "init"
    SHOPPING_CART = "shopping-cart"
    FLASH = "flash"
    UPDATE_PREFERENCES = "update-preferences"
    REGENERATE = "regenerate"
    CLEAR_CART = "clear-cart"
    LOGOUT = "logout"
    DESTROY = "destroy"
    READ = "read"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_session_id() -> str:
    return uuid.uuid4().hex


class FlashMessages:
    """One-request messages.

    Messages flashed now are stored in the session for the next request;
    ``current`` holds the ones the previous request left behind.
    """

    def __init__(self, session: MutableMapping[str, Any]) -> None:
        self._session = session
        self.current: dict[str, str] = session.pop(FLASH_KEY, None) or {}

    def flash(self, kind: str, message: str) -> None:
        pending = dict(self._session.get(FLASH_KEY) or {})
        pending[kind] = message
        self._session[FLASH_KEY] = pending

    def get(self, kind: str) -> str | None:
        return self.current.get(kind)

    def snapshot(self) -> dict[str, str | None]:
        return {kind: self.current.get(kind) for kind in FLASH_KINDS}


class SessionManager(FlowComponent):
    """Runs one session action and attaches a ``SessionInfo`` snapshot."""

    category = ComponentCategory.STATE

    def __init__(self, action: SessionAction) -> None:
        self._action = SessionAction(action)

    @property
    def action(self) -> SessionAction:
        return self._action

    async def resolve(self, ctx: RequestContext) -> None:
        if "session" not in ctx.request.scope:
            raise FlowConfigurationError("SessionManager requires SessionMiddleware")

        session = ctx.request.session
        if SESSION_ID_KEY not in session:
            session[SESSION_ID_KEY] = new_session_id()
        flashes = FlashMessages(session)
        logger.debug("Session %s", session[SESSION_ID_KEY])

        handler = getattr(self, f"_{self._action.name.lower()}")
        handler(session, flashes)

        ctx.session = SessionInfo(
            id=session.get(SESSION_ID_KEY),
            user=session.get("user"),
            visit_count=session.get("visit_count", 0),
            last_visit=session.get("last_visit"),
            cart_items=len(session.get("cart", [])),
            flash_messages=flashes.snapshot(),
        )

    def _init(self, session: MutableMapping[str, Any], flashes: FlashMessages) -> None:
        session["user"] = {
            "id": random.randint(1, 1000),
            "name": "John Doe",
            "email": "john@example.com",
            "role": "user",
            "loginTime": _now(),
            "preferences": {"theme": "dark", "language": "en", "notifications": True},
        }
        session["visit_count"] = session.get("visit_count", 0) + 1
        session["last_visit"] = _now()
        logger.info("Initialized user session")

    def _shopping_cart(self, session: MutableMapping[str, Any], flashes: FlashMessages) -> None:
        item = {
            "id": int(time.time() * 1000),
            "name": f"Session Product {random.randint(0, 99)}",
            "price": random.randint(10, 109),
            "quantity": 1,
            "addedAt": _now(),
        }
        session["cart"] = [*session.get("cart", []), item]
        session["cart_updated_at"] = _now()
        flashes.flash("cart_message", f"Added {item['name']} to your cart!")
        logger.info("Added %s to session cart", item["name"])

    def _flash(self, session: MutableMapping[str, Any], flashes: FlashMessages) -> None:
        flashes.flash("success", "Operation completed successfully!")
        flashes.flash("info", "This is an informational message")
        flashes.flash("warning", "This is a warning message")
        flashes.flash("error", "This is an error message")

    def _update_preferences(
        self, session: MutableMapping[str, Any], flashes: FlashMessages
    ) -> None:
        user = session.get("user")
        if not user:
            flashes.flash("error", "No user session found")
            return
        preferences = dict(user.get("preferences") or {})
        preferences["theme"] = "light" if preferences.get("theme") == "dark" else "dark"
        preferences["lastUpdated"] = _now()
        session["user"] = {**user, "preferences": preferences}
        flashes.flash("success", "Preferences updated successfully!")
        logger.info("Theme switched to %s", preferences["theme"])

    def _regenerate(self, session: MutableMapping[str, Any], flashes: FlashMessages) -> None:
        old = session.get(SESSION_ID_KEY)
        session[SESSION_ID_KEY] = new_session_id()
        flashes.flash("info", "Session regenerated for security")
        logger.info("Regenerated session %s -> %s", old, session[SESSION_ID_KEY])

    def _clear_cart(self, session: MutableMapping[str, Any], flashes: FlashMessages) -> None:
        session.pop("cart", None)
        session.pop("cart_updated_at", None)
        flashes.flash("success", "Shopping cart cleared")

    def _logout(self, session: MutableMapping[str, Any], flashes: FlashMessages) -> None:
        for key in USER_KEYS:
            session.pop(key, None)
        flashes.flash("info", "You have been logged out")
        logger.info("User logged out")

    def _destroy(self, session: MutableMapping[str, Any], flashes: FlashMessages) -> None:
        session.clear()
        logger.info("Session destroyed")

    def _read(self, session: MutableMapping[str, Any], flashes: FlashMessages) -> None:
        pass

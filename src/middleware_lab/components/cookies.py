"""Cookie manager: reads incoming cookies and queues cookie writes."""

from __future__ import annotations

import enum
import json
import logging
import random
import time
from datetime import datetime, timezone

from itsdangerous import BadSignature, Signer

from middleware_lab.component import ComponentCategory, FlowComponent
from middleware_lab.context import RequestContext
from middleware_lab.models import CookieJar
from middleware_lab.response import FlowResponse

logger = logging.getLogger(__name__)

DAY = 24 * 60 * 60

TRACKING_COOKIES = ("user_preference", "visit_count", "last_visit", "shopping_cart")
AUTH_COOKIE = "auth_token"


class CookieAction(str, enum.Enum):
    SET_BASIC = "set-basic"
    SET_SECURE = "set-secure"
    SET_TRACKING = "set-tracking"
    SHOPPING_CART = "shopping-cart"
    CLEAR = "clear"
    CLEAR_AUTH = "clear-auth"
    READ = "read"


def read_signed(jar: CookieJar, name: str, signer: Signer) -> str | None:
    """Return the verified value of a signed cookie, or None if absent or tampered."""
    raw = jar.get(name)
    if raw is None:
        return None
    try:
        return signer.unsign(raw).decode("utf-8")
    except BadSignature:
        logger.warning("Rejected tampered cookie %s", name)
        return None


class CookieManager(FlowComponent):
    """Loads ``ctx.cookies`` and applies one cookie action to the response."""

    category = ComponentCategory.STATE

    def __init__(self, action: CookieAction, signer: Signer) -> None:
        self._action = CookieAction(action)
        self._signer = signer

    @property
    def action(self) -> CookieAction:
        return self._action

    async def resolve(self, ctx: RequestContext) -> None:
        jar = CookieJar(incoming=dict(ctx.request.cookies))
        ctx.cookies = jar
        logger.debug("Incoming cookies: %s", jar.names)

        action = self._action
        if action is CookieAction.SET_BASIC:
            jar.set("user_preference", "dark_mode", max_age=7 * DAY)
        elif action is CookieAction.SET_SECURE:
            token = self._signer.sign("secure_token_12345").decode("utf-8")
            jar.set(
                AUTH_COOKIE,
                token,
                max_age=60 * 60,
                httponly=True,
                secure=True,
                samesite="strict",
            )
        elif action is CookieAction.SET_TRACKING:
            try:
                visits = int(jar.get("visit_count", "0")) + 1
            except ValueError:
                visits = 1
            now = datetime.now(timezone.utc).isoformat()
            jar.set("visit_count", str(visits), max_age=30 * DAY)
            jar.set("last_visit", now, max_age=30 * DAY)
            logger.info("Visit count is now %d", visits)
        elif action is CookieAction.SHOPPING_CART:
            cart = jar.get_json("shopping_cart", [])
            if not isinstance(cart, list):
                cart = []
            stamp = int(time.time() * 1000)
            item = {
                "id": stamp,
                "name": f"Product {stamp}",
                "price": random.randint(10, 109),
                "quantity": 1,
            }
            cart.append(item)
            jar.set(
                "shopping_cart",
                json.dumps(cart, separators=(",", ":")),
                max_age=7 * DAY,
            )
            logger.info("Added %s to cookie cart", item["name"])
        elif action is CookieAction.CLEAR:
            jar.delete(*TRACKING_COOKIES)
        elif action is CookieAction.CLEAR_AUTH:
            jar.delete(AUTH_COOKIE)

        if action is not CookieAction.READ:
            logger.info("Cookie action %s applied", action.value)

    async def respond(self, ctx: RequestContext, response: FlowResponse) -> None:
        jar = ctx.cookies
        if jar is None:
            return
        for write in jar.writes:
            response.set_cookie(
                write.name,
                write.value,
                max_age=write.max_age,
                httponly=write.httponly,
                secure=write.secure,
                samesite=write.samesite,
                path=write.path,
            )
        for name in jar.deletes:
            response.delete_cookie(name)

"""Cookie and session demos under ``/demo``."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi import Request

from middleware_lab.components.cookies import AUTH_COOKIE, CookieAction, read_signed
from middleware_lab.components.sessions import FLASH_KINDS, SessionAction
from middleware_lab.context import RequestContext
from middleware_lab.models import CookieJar
from middleware_lab.registry import StageRegistry
from middleware_lab.routing import FlowRouter

COOKIE_ENDPOINTS = {
    "basic": "/demo/cookies/set-basic - Set basic preference cookie",
    "secure": "/demo/cookies/set-secure - Set secure authentication cookie",
    "tracking": "/demo/cookies/set-tracking - Set tracking cookies",
    "cart": "/demo/cookies/shopping-cart - Cookie-based cart",
    "clear": "/demo/cookies/clear - Clear cookies",
    "clearAuth": "/demo/cookies/clear-auth - Clear auth cookies",
    "read": "/demo/cookies/read - Read all cookies",
}

SESSION_ENDPOINTS = {
    "init": "/demo/sessions/init - Initialize user session",
    "cart": "/demo/sessions/shopping-cart - Session-based cart",
    "flash": "/demo/sessions/flash - Flash messages demo",
    "preferences": "/demo/sessions/update-preferences - Update user preferences",
    "regenerate": "/demo/sessions/regenerate - Regenerate session ID",
    "clearCart": "/demo/sessions/clear-cart - Clear session cart",
    "logout": "/demo/sessions/logout - Logout (clear user data)",
    "destroy": "/demo/sessions/destroy - Destroy entire session",
    "read": "/demo/sessions/read - Read session data",
}


def _cart_value(items: list[dict[str, Any]]) -> int:
    return sum(item.get("price", 0) * item.get("quantity", 0) for item in items)


def _cookie_cart(jar: CookieJar) -> list[dict[str, Any]]:
    cart = jar.get_json("shopping_cart", [])
    return cart if isinstance(cart, list) else []


def cookies_payload(ctx: RequestContext, stages: StageRegistry) -> dict[str, Any]:
    jar = ctx.cookies or CookieJar()
    auth_token = read_signed(jar, AUTH_COOKIE, stages.signer)
    return {
        "message": "Cookie Management Demo",
        "operation": "Cookie operation completed",
        "cookie_information": {
            "total_cookies": len(jar.names),
            "cookie_names": jar.names,
            "cookie_sizes": jar.sizes,
            "total_size": jar.total_size,
        },
        "all_cookies": {
            name: "[HIDDEN FOR SECURITY]" if name == AUTH_COOKIE else value
            for name, value in jar.incoming.items()
        },
        "specific_cookies": {
            "user_preference": jar.get("user_preference"),
            "visit_count": jar.get("visit_count"),
            "last_visit": jar.get("last_visit"),
            "shopping_cart": jar.get("shopping_cart"),
            "auth_token": "[HIDDEN FOR SECURITY]" if jar.get(AUTH_COOKIE) else None,
            "auth_token_verified": auth_token is not None,
        },
        "cookie_facts": {
            "max_size": "4KB per cookie",
            "max_cookies_per_domain": "~50-300 (browser dependent)",
            "sent_with_requests": "All matching cookies sent with every HTTP request",
            "client_access": "Accessible via JavaScript (unless httpOnly)",
            "security": "Can be secured with httpOnly, secure, sameSite flags",
        },
    }


def sessions_payload(ctx: RequestContext) -> dict[str, Any]:
    info = ctx.session
    user = info.user if info else None
    return {
        "message": "Session Management Demo",
        "operation": "Session operation completed",
        "session_information": {
            "session_id": info.id if info else None,
            "visit_count": info.visit_count if info else 0,
            "last_visit": info.last_visit if info else None,
            "cart_items_count": info.cart_items if info else 0,
            "user_authenticated": bool(user),
            "user_data": {
                "id": user.get("id"),
                "name": user.get("name"),
                "email": user.get("email"),
                "role": user.get("role"),
                "theme": (user.get("preferences") or {}).get("theme"),
                "login_time": user.get("loginTime"),
            }
            if user
            else None,
        },
        "flash_messages": info.flash_messages if info else {},
        "session_facts": {
            "storage": "Signed cookie managed by SessionMiddleware",
            "identification": "Session ID stored inside the session",
            "security": "Signed, so the client cannot tamper with it",
            "lifecycle": "Persists until expiry or manual cleanup",
        },
    }


def _cookie_route(stages: StageRegistry, action: CookieAction) -> Callable[..., Any]:
    async def cookie_action(
        ctx: RequestContext = stages.depends(stages.cookies(action)),
    ):
        return cookies_payload(ctx, stages)

    return cookie_action


def _session_route(stages: StageRegistry, action: SessionAction) -> Callable[..., Any]:
    async def session_action(
        ctx: RequestContext = stages.depends(stages.sessions(action)),
    ):
        return sessions_payload(ctx)

    return session_action


def build_router(stages: StageRegistry) -> FlowRouter:
    router = FlowRouter(prefix="/demo", tags=["cookies & sessions"])

    @router.get("/cookies-sessions", name="cookies_sessions.index")
    async def index():
        return {
            "message": "Cookie & Session Learning Lab",
            "description": "Learn cookies and sessions with practical examples",
            "cookie_endpoints": COOKIE_ENDPOINTS,
            "session_endpoints": SESSION_ENDPOINTS,
            "comparison_endpoint": "/demo/cookies-vs-sessions - Compare both approaches",
            "security_tips": {
                "cookies": [
                    "Use httpOnly for sensitive data to prevent XSS",
                    "Use secure flag for HTTPS-only cookies",
                    "Use sameSite for CSRF protection",
                    "Sign cookies for integrity verification",
                    "Keep cookie size under 4KB",
                ],
                "sessions": [
                    "Regenerate session ID after authentication",
                    "Set appropriate session timeouts",
                    "Clear sensitive session data on logout",
                    "Use HTTPS to protect session cookies",
                ],
            },
        }

    for cookie_action in CookieAction:
        router.add_api_route(
            f"/cookies/{cookie_action.value}",
            _cookie_route(stages, cookie_action),
            methods=["GET"],
            name=f"cookies.{cookie_action.value}",
        )

    for session_action in SessionAction:
        router.add_api_route(
            f"/sessions/{session_action.value}",
            _session_route(stages, session_action),
            methods=["GET"],
            name=f"sessions.{session_action.value}",
        )

    @router.get("/cookies-vs-sessions", name="cookies_sessions.compare")
    async def compare(
        request: Request,
        ctx: RequestContext = stages.depends(stages.cookies(CookieAction.READ)),
    ):
        cookie_cart = _cookie_cart(ctx.cookies or CookieJar())
        session_cart = request.session.get("cart", [])
        user = request.session.get("user")
        return {
            "message": "Cookie vs Session Comparison",
            "comparison": {
                "storage_location": {
                    "cookies": "Client-side (browser)",
                    "sessions": "Signed session cookie",
                },
                "data_transmission": {
                    "cookies": "Sent with every HTTP request to domain",
                    "sessions": "Sent as one signed cookie",
                },
                "security": {
                    "cookies": "Visible to client, can be secured with flags",
                    "sessions": "Signed, tampering is detected",
                },
            },
            "current_data_comparison": {
                "cookie_shopping_cart": {
                    "items": cookie_cart,
                    "total_items": len(cookie_cart),
                    "storage_method": "Browser cookie",
                    "accessible_to_js": True,
                },
                "session_shopping_cart": {
                    "items": session_cart,
                    "total_items": len(session_cart),
                    "storage_method": "Server session",
                    "accessible_to_js": False,
                },
                "session_user_data": {"stored": True, "method": "Session only"}
                if user
                else {
                    "stored": False,
                    "note": "Visit /demo/sessions/init to create session",
                },
            },
            "best_practices": {
                "hybrid_approach": "Cookies for preferences, sessions for sensitive data",
                "security_first": "Never store sensitive data in cookies",
                "user_experience": "Flash messages work best with sessions",
            },
        }

    @router.get("/shopping-cart-comparison", name="cookies_sessions.cart")
    async def shopping_cart(
        request: Request,
        ctx: RequestContext = stages.depends(stages.cookies(CookieAction.READ)),
    ):
        cookie_cart = _cookie_cart(ctx.cookies or CookieJar())
        session_cart = request.session.get("cart", [])
        return {
            "message": "Shopping Cart Comparison Demo",
            "cookie_based_cart": {
                "items": cookie_cart,
                "total_items": len(cookie_cart),
                "total_value": _cart_value(cookie_cart),
                "storage": "Client-side cookie",
            },
            "session_based_cart": {
                "items": session_cart,
                "total_items": len(session_cart),
                "total_value": _cart_value(session_cart),
                "storage": "Server-side session",
            },
            "demo_actions": {
                "add_to_cookie_cart": "GET /demo/cookies/shopping-cart",
                "add_to_session_cart": "GET /demo/sessions/shopping-cart",
                "clear_cookie_cart": "GET /demo/cookies/clear",
                "clear_session_cart": "GET /demo/sessions/clear-cart",
            },
        }

    @router.get("/flash-messages", name="cookies_sessions.flash")
    async def flash_messages(
        ctx: RequestContext = stages.depends(stages.sessions(SessionAction.READ)),
    ):
        messages = ctx.session.flash_messages if ctx.session else {}
        found = any(messages.get(kind) for kind in FLASH_KINDS)
        return {
            "message": "Flash Messages Demo",
            "description": (
                "Flash messages are temporary messages that persist for "
                "exactly one request"
            ),
            "flash_messages": messages,
            "demo_instructions": [
                "Visit /demo/sessions/flash to set flash messages",
                "Then visit this endpoint to see and consume them",
                "Refresh this page - messages will be gone!",
            ],
            "note": "Flash messages displayed above will be gone on next request!"
            if found
            else "No flash messages found. Visit /demo/sessions/flash first!",
        }

    return router

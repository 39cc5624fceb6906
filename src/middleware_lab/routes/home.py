"""Overview of the demo endpoints."""

from __future__ import annotations

from typing import Any

from middleware_lab.registry import StageRegistry
from middleware_lab.routing import FlowRouter

GLOBAL_MIDDLEWARE = ["RequestLogger", "CORS", "SecurityHeaders"]


def overview(port: int) -> dict[str, Any]:
    base = f"http://localhost:{port}"
    return {
        "message": "Middleware Learning Lab",
        "description": "Explore different middleware patterns and use cases",
        "available_endpoints": {
            "public": {
                "path": "/demo/public",
                "description": "Only global middleware",
                "middleware": GLOBAL_MIDDLEWARE,
            },
            "protected": {
                "path": "/demo/protected",
                "description": "Requires authentication",
                "middleware": ["Global middleware", "Auth"],
            },
            "admin": {
                "path": "/demo/admin",
                "description": "Admin-only access",
                "middleware": ["Global middleware", "Auth", "Admin"],
            },
            "rate_limited": {
                "path": "/demo/rate-limited",
                "description": "Strict rate limiting (10/min)",
                "middleware": ["Global middleware", "RateLimit:strict"],
            },
            "beta": {
                "path": "/demo/beta",
                "description": "Beta feature (50% rollout)",
                "middleware": ["Global middleware", "FeatureFlag:beta-features"],
            },
            "device_aware": {
                "path": "/demo/device",
                "description": "Device detection and optimization",
                "middleware": ["Global middleware", "DeviceDetector"],
            },
            "multiple": {
                "path": "/demo/multiple",
                "description": "Multiple middleware chaining",
                "middleware": ["Global middleware", "Auth", "DeviceDetector", "FeatureFlag"],
            },
            "cookies_sessions": {
                "path": "/demo/cookies-sessions",
                "description": "Cookie and session management",
                "middleware": ["Global middleware", "CookieManager", "SessionManager"],
            },
        },
        "authentication_tokens": {
            "user": "user-token-123",
            "admin": "admin-token-456",
            "demo": "demo-token-789",
        },
        "usage_examples": {
            "curl_auth": (
                'curl -H "Authorization: Bearer user-token-123" '
                f"{base}/demo/protected"
            ),
            "curl_admin": (
                'curl -H "Authorization: Bearer admin-token-456" '
                f"{base}/demo/admin"
            ),
            "postman_tip": "Add Authorization header with Bearer token",
        },
    }


def build_router(stages: StageRegistry) -> FlowRouter:
    router = FlowRouter(tags=["home"])

    @router.get("/", name="home")
    async def home() -> dict[str, Any]:
        return overview(stages.settings.port)

    return router

"""``/demo`` routes, one per middleware pattern.

The payload builders are shared with the ``/premium`` and ``/api/v1``
groups, which reuse the same handlers behind different flows.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from fastapi import Request

from middleware_lab.context import RequestContext
from middleware_lab.exceptions import FlowConfigurationError
from middleware_lab.models import User
from middleware_lab.registry import StageRegistry
from middleware_lab.routing import FlowRouter


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def public_payload(request: Request) -> dict[str, Any]:
    return {
        "message": "This is a public endpoint",
        "description": "Only global middleware runs here",
        "data": {
            "method": request.method,
            "url": request.url.path,
            "timestamp": _now(),
        },
    }


def _require_user(ctx: RequestContext) -> User:
    if ctx.user is None:
        raise FlowConfigurationError(
            f"{ctx.request.url.path} needs an authentication stage"
        )
    return ctx.user


def protected_payload(ctx: RequestContext) -> dict[str, Any]:
    user = _require_user(ctx)
    return {
        "message": "This is a protected endpoint",
        "description": "Authentication required to access this",
        "user": {"name": user.name, "email": user.email, "role": user.role},
        "data": {
            "method": ctx.request.method,
            "url": ctx.request.url.path,
            "authenticated_at": _now(),
        },
    }


def admin_payload(ctx: RequestContext) -> dict[str, Any]:
    user = _require_user(ctx)
    permissions = list(ctx.admin.permissions) if ctx.admin else []
    return {
        "message": "This is an admin-only endpoint",
        "description": "Requires admin role to access",
        "admin": {"name": user.name, "role": user.role, "permissions": permissions},
        "system_info": {
            "server_time": _now(),
            "total_users": 42,
            "active_sessions": 15,
        },
    }


def rate_limited_payload(ctx: RequestContext) -> dict[str, Any]:
    return {
        "message": "This endpoint has strict rate limiting",
        "description": "Only 10 requests per minute allowed",
        "request_info": {
            "ip": ctx.client_ip,
            "method": ctx.request.method,
            "url": ctx.request.url.path,
        },
        "hint": "Try making multiple requests quickly to see rate limiting in action",
    }


def beta_payload(ctx: RequestContext) -> dict[str, Any]:
    feature = ctx.feature
    return {
        "message": "This is a beta feature",
        "description": "Protected by feature flags with 50% rollout",
        "feature_info": {
            "name": feature.name if feature else None,
            "enabled": feature.enabled if feature else None,
            "rolloutPercentage": feature.rollout_percentage if feature else None,
        },
        "beta_data": {
            "new_algorithm": "active",
            "performance_boost": "25%",
            "additional_features": ["real-time-sync", "advanced-analytics"],
        },
    }


def device_payload(ctx: RequestContext) -> dict[str, Any]:
    device = ctx.device
    if device is not None and device.is_mobile:
        content = {"layout": "mobile", "images": "compressed", "js": "minimal"}
    else:
        content = {"layout": "desktop", "images": "full-res", "js": "complete"}
    return {
        "message": "This endpoint adapts to your device",
        "description": "Response changes based on device type",
        "device_detection": asdict(device) if device else None,
        "optimized_content": content,
    }


def multiple_payload(ctx: RequestContext) -> dict[str, Any]:
    user, device, feature = ctx.user, ctx.device, ctx.feature
    return {
        "message": "This endpoint uses multiple middleware",
        "description": "Demonstrates middleware chaining and interaction",
        "middleware_data": {
            "user": {"name": user.name, "role": user.role} if user else None,
            "device": {"type": device.type, "browser": device.browser} if device else None,
            "feature": {"name": feature.name, "enabled": feature.enabled} if feature else None,
        },
        "combined_result": {
            "access_level": user.role if user else "guest",
            "device_optimization": device.type if device else "unknown",
            "feature_access": feature.enabled if feature else False,
        },
    }


def created_payload(ctx: RequestContext) -> dict[str, Any]:
    return {
        "message": "Data created successfully",
        "created_data": ctx.body if ctx.body is not None else {},
        "created_by": ctx.user.name if ctx.user else "anonymous",
        "created_at": _now(),
    }


def build_router(stages: StageRegistry) -> FlowRouter:
    router = FlowRouter(prefix="/demo", tags=["demo"])

    @router.get("/public", name="demo.public")
    async def public(request: Request):
        return public_payload(request)

    @router.get("/protected", name="demo.protected")
    async def protected(ctx: RequestContext = stages.depends(stages.auth())):
        return protected_payload(ctx)

    @router.get("/admin", name="demo.admin")
    async def admin(
        ctx: RequestContext = stages.depends(stages.auth(), stages.admin()),
    ):
        return admin_payload(ctx)

    @router.get("/rate-limited", name="demo.rateLimited")
    async def rate_limited(
        ctx: RequestContext = stages.depends(stages.rate_limit("strict")),
    ):
        return rate_limited_payload(ctx)

    @router.get("/beta", name="demo.beta")
    async def beta(
        ctx: RequestContext = stages.depends(stages.feature("beta-features")),
    ):
        return beta_payload(ctx)

    @router.get("/device", name="demo.device")
    async def device(ctx: RequestContext = stages.depends(stages.device())):
        return device_payload(ctx)

    @router.get("/multiple", name="demo.multiple")
    async def multiple(
        ctx: RequestContext = stages.depends(
            stages.auth(), stages.device(), stages.feature("new-api")
        ),
    ):
        return multiple_payload(ctx)

    @router.get("/transform", name="demo.transform")
    async def transform(ctx: RequestContext = stages.depends(stages.transform())):
        return public_payload(ctx.request)

    @router.post("/create", name="demo.create", status_code=201)
    async def create(
        ctx: RequestContext = stages.depends(
            stages.auth(), stages.rate_limit("default"), stages.body()
        ),
    ):
        return created_payload(ctx)

    @router.post("/admin/create", name="demo.admin.create", status_code=201)
    async def admin_create(
        ctx: RequestContext = stages.depends(
            stages.auth(), stages.admin(), stages.transform(), stages.body()
        ),
    ):
        return created_payload(ctx)

    @router.get("/error", name="demo.error")
    async def error(ctx: RequestContext = stages.depends(stages.transform())):
        raise RuntimeError("Intentional error for middleware testing")

    @router.get("/experimental", name="demo.experimental")
    async def experimental(
        ctx: RequestContext = stages.depends(stages.feature("experimental")),
    ):
        return beta_payload(ctx)

    return router

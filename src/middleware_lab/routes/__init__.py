"""HTTP routes, grouped by URL prefix."""

from __future__ import annotations

from fastapi import FastAPI

from middleware_lab.dependency import enrich_openapi
from middleware_lab.registry import StageRegistry
from middleware_lab.routes import api, cookies_sessions, demo, home, premium


def include_routes(app: FastAPI, stages: StageRegistry) -> None:
    routers = [
        home.build_router(stages),
        demo.build_router(stages),
        cookies_sessions.build_router(stages),
        premium.build_router(stages),
        api.build_router(stages),
    ]
    enrich_openapi(app, [route for router in routers for route in router.routes])
    for router in routers:
        app.include_router(router)


__all__ = ["include_routes"]

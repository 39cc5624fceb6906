"""``/premium`` group: every route needs a user and the premium feature."""

from __future__ import annotations

from middleware_lab.context import RequestContext
from middleware_lab.registry import StageRegistry
from middleware_lab.routes.demo import admin_payload, created_payload, multiple_payload
from middleware_lab.routing import FlowRouter


def build_router(stages: StageRegistry) -> FlowRouter:
    router = FlowRouter(prefix="/premium", tags=["premium"])
    group = stages.flow(
        stages.auth(), stages.feature("premium-features"), stages.transform()
    )

    @router.get("/dashboard", name="premium.dashboard")
    async def dashboard(ctx: RequestContext = stages.depends(group)):
        return multiple_payload(ctx)

    @router.get("/analytics", name="premium.analytics")
    async def analytics(ctx: RequestContext = stages.depends(group)):
        return admin_payload(ctx)

    @router.post("/settings", name="premium.settings", status_code=201)
    async def settings(ctx: RequestContext = stages.depends(group, stages.body())):
        return created_payload(ctx)

    return router

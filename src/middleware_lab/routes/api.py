"""``/api/v1`` group: enveloped responses with per-route rate limits."""

from __future__ import annotations

from middleware_lab.context import RequestContext
from middleware_lab.registry import StageRegistry
from middleware_lab.routes.demo import created_payload, protected_payload, public_payload
from middleware_lab.routing import FlowRouter


def build_router(stages: StageRegistry) -> FlowRouter:
    router = FlowRouter(prefix="/api/v1", tags=["api"])
    group = stages.flow(stages.transform())

    @router.get("/data", name="api.data")
    async def data(
        ctx: RequestContext = stages.depends(group, stages.rate_limit("generous")),
    ):
        return public_payload(ctx.request)

    @router.get("/users", name="api.users")
    async def users(
        ctx: RequestContext = stages.depends(
            group, stages.auth(), stages.rate_limit("default")
        ),
    ):
        return protected_payload(ctx)

    @router.post("/process", name="api.process", status_code=201)
    async def process(
        ctx: RequestContext = stages.depends(
            group, stages.auth(), stages.rate_limit("strict"), stages.body()
        ),
    ):
        return created_payload(ctx)

    return router

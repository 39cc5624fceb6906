"""FlowRoute: runs the response phase of a flow around the endpoint."""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine, Sequence
from typing import Any

from fastapi import APIRouter
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from middleware_lab.component import FlowComponent
from middleware_lab.context import RequestContext, current_context
from middleware_lab.response import FlowResponse

logger = logging.getLogger(__name__)


async def run_response_phase(
    ctx: RequestContext,
    response: Response,
    components: Sequence[FlowComponent],
) -> Response:
    """Give each component a chance to edit the response, innermost first."""
    view = FlowResponse(response)
    for component in reversed(components):
        await component.respond(ctx, view)
    return view.finalize()


async def recover_response(ctx: RequestContext, exc: Exception) -> Response | None:
    """Ask components, innermost first, to turn ``exc`` into a response.

    Only the components outside the one that recovered see the response phase,
    the ones inside it were unwound by the error.
    """
    if ctx.flow is None:
        return None
    components = ctx.flow.components
    for index in range(len(components) - 1, -1, -1):
        recovered = await components[index].recover(ctx, exc)
        if recovered is not None:
            return await run_response_phase(ctx, recovered, components[:index])
    return None


async def abort_response(ctx: RequestContext, exc: HTTPException) -> Response:
    """Render a stage rejection and run the response phase of the stages before it."""
    response = JSONResponse(
        {"detail": exc.detail}, status_code=exc.status_code, headers=exc.headers
    )
    if ctx.flow is None or ctx.aborted_by is None:
        return response
    components = ctx.flow.components
    return await run_response_phase(
        ctx, response, components[: components.index(ctx.aborted_by)]
    )


class FlowRoute(APIRoute):
    """APIRoute that completes the flow attached by ``flow_dependency``."""

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        handler = super().get_route_handler()

        async def flow_route_handler(request: Request) -> Response:
            try:
                response = await handler(request)
            except HTTPException as exc:
                ctx = current_context(request)
                if ctx is None or ctx.aborted_by is None:
                    raise
                return await abort_response(ctx, exc)
            except RequestValidationError:
                raise
            except Exception as exc:
                ctx = current_context(request)
                if ctx is None:
                    raise
                recovered = await recover_response(ctx, exc)
                if recovered is None:
                    raise
                logger.debug("Recovered %s on %s", type(exc).__name__, request.url.path)
                return recovered

            ctx = current_context(request)
            if ctx is None or ctx.flow is None:
                return response
            return await run_response_phase(ctx, response, ctx.flow.components)

        return flow_route_handler


class FlowRouter(APIRouter):
    """APIRouter whose routes default to ``FlowRoute``."""

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("route_class", FlowRoute)
        super().__init__(**kwargs)

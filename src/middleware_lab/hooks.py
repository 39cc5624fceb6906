"""FlowHook base and convenience hook classes."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from middleware_lab.component import FlowComponent
from middleware_lab.context import RequestContext
from middleware_lab.exceptions import FlowAbort, FlowException


class FlowHook:
    """Base abstraction for lifecycle hooks. All methods are no-op by default."""

    async def on_flow_start(self, ctx: RequestContext) -> None:
        pass

    async def on_flow_end(self, ctx: RequestContext) -> None:
        pass

    async def on_component(
        self,
        ctx: RequestContext,
        component: FlowComponent,
        error: FlowException | None,
    ) -> None:
        pass


class BeforeFlow(FlowHook):
    """Convenience hook that only fires on flow start."""

    def __init__(self, callback: Callable[[RequestContext], Awaitable[None]]) -> None:
        self._callback = callback

    async def on_flow_start(self, ctx: RequestContext) -> None:
        await self._callback(ctx)


class AfterFlow(FlowHook):
    """Convenience hook that only fires on flow end."""

    def __init__(self, callback: Callable[[RequestContext], Awaitable[None]]) -> None:
        self._callback = callback

    async def on_flow_end(self, ctx: RequestContext) -> None:
        await self._callback(ctx)


class AfterComponent(FlowHook):
    """Convenience hook that fires after each component."""

    def __init__(
        self,
        callback: Callable[
            [RequestContext, FlowComponent, FlowException | None], Awaitable[None]
        ],
    ) -> None:
        self._callback = callback

    async def on_component(
        self,
        ctx: RequestContext,
        component: FlowComponent,
        error: FlowException | None,
    ) -> None:
        await self._callback(ctx, component, error)


class LoggingHook(FlowHook):
    """Traces each component's outcome on the given logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("middleware_lab.flow")

    async def on_flow_start(self, ctx: RequestContext) -> None:
        self._logger.debug(
            "Flow started for %s %s", ctx.request.method, ctx.request.url.path
        )

    async def on_component(
        self,
        ctx: RequestContext,
        component: FlowComponent,
        error: FlowException | None,
    ) -> None:
        name = type(component).__name__
        if error is None:
            self._logger.debug("%s passed", name)
        elif isinstance(error, FlowAbort):
            self._logger.info(
                "%s stopped %s %s with %d: %s",
                name,
                ctx.request.method,
                ctx.request.url.path,
                error.status_code,
                error.detail,
            )
        else:
            self._logger.warning("%s failed: %s", name, error)

    async def on_flow_end(self, ctx: RequestContext) -> None:
        self._logger.debug("Flow finished for %s", ctx.request.url.path)

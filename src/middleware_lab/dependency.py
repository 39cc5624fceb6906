"""flow_dependency(): factory producing FastAPI-compatible dependency callables."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from fastapi import HTTPException
from starlette.requests import Request

from middleware_lab.context import CONTEXT_STATE_KEY, RequestContext
from middleware_lab.exceptions import FlowAbort, FlowException, FlowInternalError
from middleware_lab.flow import Flow, ResolvedFlow
from middleware_lab.openapi import collect_openapi_metadata


def flow_dependency(flow: Flow) -> Callable[..., Awaitable[RequestContext]]:
    """Return a FastAPI-compatible dependency that executes the flow.

    The flow is resolved here, so composition errors surface when the route
    is declared rather than on the first request.
    """
    resolved = flow.resolve()
    dep = _make_dependency(resolved)

    # Attach metadata for OpenAPI enrichment
    dep._flow_openapi_metadata = collect_openapi_metadata(resolved)  # type: ignore[attr-defined]
    dep._flow_resolved = resolved  # type: ignore[attr-defined]

    return dep


def _make_dependency(
    resolved: ResolvedFlow,
) -> Callable[..., Awaitable[RequestContext]]:
    async def dependency(request: Request) -> RequestContext:
        ctx = RequestContext(request=request, flow=resolved)
        setattr(request.state, CONTEXT_STATE_KEY, ctx)

        for hook in resolved.hooks:
            await hook.on_flow_start(ctx)

        try:
            for component in resolved.components:
                try:
                    await component.resolve(ctx)
                except FlowAbort as exc:
                    ctx.aborted_by = component
                    for hook in resolved.hooks:
                        await hook.on_component(ctx, component, exc)
                    raise
                else:
                    for hook in resolved.hooks:
                        await hook.on_component(ctx, component, None)
        except FlowAbort as exc:
            for hook in resolved.hooks:
                await hook.on_flow_end(ctx)
            raise HTTPException(
                status_code=exc.status_code,
                detail=exc.payload(),
                headers=exc.headers or None,
            ) from exc
        except FlowException:
            for hook in resolved.hooks:
                await hook.on_flow_end(ctx)
            raise
        except Exception as exc:
            for hook in resolved.hooks:
                await hook.on_flow_end(ctx)
            wrapped = FlowInternalError("Internal flow error", cause=exc)
            raise HTTPException(status_code=500, detail=wrapped.detail) from wrapped

        for hook in resolved.hooks:
            await hook.on_flow_end(ctx)

        return ctx

    return dependency


def enrich_openapi(app: Any, routes: Iterable[Any] | None = None) -> None:
    """Enrich a FastAPI app's OpenAPI schema with flow metadata.

    Injects security schemes, error responses and vendor extensions from flow
    components. ``routes`` defaults to the app's own routes; enrich a
    router's routes before the router is included.
    """
    from fastapi import FastAPI
    from fastapi.routing import APIRoute

    if not isinstance(app, FastAPI):
        return

    all_schemes: dict[str, Any] = {}
    for route in app.routes if routes is None else routes:
        if not isinstance(route, APIRoute):
            continue

        metadata = _find_flow_metadata(route)
        if not metadata:
            continue

        all_schemes.update(metadata.get("security_schemes", {}))
        extra: dict[str, Any] = dict(route.openapi_extra or {})

        if "security" in metadata:
            extra["security"] = metadata["security"]
        if "parameters" in metadata:
            extra["parameters"] = metadata["parameters"]
        for key, value in metadata.items():
            if key.startswith("x-"):
                extra[key] = value

        if "responses" in metadata:
            responses = dict(route.responses or {})
            for code, resp in metadata["responses"].items():
                responses.setdefault(int(code), resp)
            route.responses = responses

        if extra:
            route.openapi_extra = extra

    if all_schemes:
        _register_security_schemes(app, all_schemes)


def _find_flow_metadata(route: Any) -> dict[str, Any] | None:
    """Find flow OpenAPI metadata attached to route dependencies."""
    for dep in route.dependant.dependencies:
        metadata = getattr(dep.call, "_flow_openapi_metadata", None)
        if metadata is not None:
            result: dict[str, Any] = metadata
            return result
    return None


def _register_security_schemes(app: Any, schemes: dict[str, Any]) -> None:
    original_schema = app.openapi

    def custom_openapi() -> dict[str, Any]:
        schema: dict[str, Any] = original_schema()
        components = schema.setdefault("components", {})
        components.setdefault("securitySchemes", {}).update(schemes)
        return schema

    app.openapi = custom_openapi

"""Tests for OpenAPI enrichment from flow metadata."""

from __future__ import annotations

from typing import Any

from fastapi import Depends, FastAPI

from middleware_lab.components.authentication import BearerAuthentication, TokenDirectory
from middleware_lab.components.permissions import HasRole
from middleware_lab.context import RequestContext
from middleware_lab.dependency import enrich_openapi, flow_dependency
from middleware_lab.flow import Flow
from middleware_lab.openapi import collect_openapi_metadata
from middleware_lab.routing import FlowRouter


class _ExtraForbidden(HasRole):
    def openapi_spec(self) -> dict[str, Any] | None:
        return {"responses": {"403": {"description": "Feature disabled"}}}


class TestCollectMetadata:
    def test_duplicate_response_descriptions_joined(self) -> None:
        auth = BearerAuthentication(TokenDirectory({}).lookup)
        resolved = Flow(auth, HasRole(), _ExtraForbidden()).resolve()
        metadata = collect_openapi_metadata(resolved)
        assert metadata["responses"]["403"]["description"] == (
            "Insufficient privileges; Feature disabled"
        )
        assert metadata["x-roles"] == ["admin"]

    def test_empty_flow(self) -> None:
        assert collect_openapi_metadata(Flow().resolve()) == {}


class TestAppSchema:
    def test_security_schemes_registered(self, app: FastAPI) -> None:
        schemes = app.openapi()["components"]["securitySchemes"]
        assert "BearerToken" in schemes
        assert "TokenQuery" in schemes

    def test_route_responses_and_extensions(self, app: FastAPI) -> None:
        paths = app.openapi()["paths"]
        admin = paths["/demo/admin"]["get"]
        assert {"401", "403"} <= set(admin["responses"])
        assert admin["x-roles"] == ["admin"]
        assert admin["security"] == [{"BearerToken": []}, {"TokenQuery": []}]

        limited = paths["/demo/rate-limited"]["get"]
        assert "429" in limited["responses"]
        assert limited["x-rate-limit"] == ["strict: 10/60s"]

        assert "security" not in paths["/demo/public"]["get"]

    def test_router_enriched_before_include(self) -> None:
        auth = BearerAuthentication(TokenDirectory({}).lookup)
        dep = flow_dependency(Flow(auth, HasRole()))
        router = FlowRouter(prefix="/staff")

        @router.get("/report")
        async def report(ctx: RequestContext = Depends(dep)) -> dict[str, Any]:  # noqa: B008
            return {}

        app = FastAPI()
        enrich_openapi(app, router.routes)
        app.include_router(router)

        schema = app.openapi()
        assert "BearerToken" in schema["components"]["securitySchemes"]
        operation = schema["paths"]["/staff/report"]["get"]
        assert {"401", "403"} <= set(operation["responses"])
        assert operation["x-roles"] == ["admin"]

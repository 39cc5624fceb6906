"""Tests for the response envelope."""

from __future__ import annotations

import json
import re
from typing import Any

from starlette.responses import JSONResponse, PlainTextResponse

from middleware_lab.component import ComponentCategory
from middleware_lab.components.transform import (
    ResponseTransformer,
    generate_request_id,
    to_base36,
)
from middleware_lab.response import FlowResponse

REQUEST_ID = re.compile(r"^req_[0-9a-z]+_[0-9a-z]{11}$")
PROCESSING_TIME = re.compile(r"^\d+\.\d{2}ms$")


class TestRequestId:
    def test_base36(self) -> None:
        assert to_base36(0) == "0"
        assert to_base36(35) == "z"
        assert to_base36(36) == "10"

    def test_format(self) -> None:
        assert REQUEST_ID.match(generate_request_id())

    def test_unique(self) -> None:
        assert len({generate_request_id() for _ in range(50)}) == 50


class TestResponseTransformer:
    def test_category_is_outermost(self) -> None:
        assert ResponseTransformer().category == ComponentCategory.ENVELOPE

    async def test_resolve_sets_id_and_start(self, make_ctx: Any) -> None:
        ctx = make_ctx()
        await ResponseTransformer().resolve(ctx)
        assert REQUEST_ID.match(ctx.request_id)
        assert ctx.started_at is not None

    async def test_respond_enriches_json(self, make_ctx: Any) -> None:
        transformer = ResponseTransformer(version="2.0.0", server_name="Lab")
        ctx = make_ctx()
        await transformer.resolve(ctx)
        view = FlowResponse(JSONResponse({"message": "hi"}))
        await transformer.respond(ctx, view)

        assert view.headers["X-Request-ID"] == ctx.request_id
        assert PROCESSING_TIME.match(view.headers["X-Processing-Time"])
        assert view.headers["X-Server"] == "Lab"
        meta = view.payload["meta"]
        assert meta["requestId"] == ctx.request_id
        assert meta["version"] == "2.0.0"
        assert PROCESSING_TIME.match(meta["processingTime"])
        assert view.payload["message"] == "hi"

    async def test_respond_leaves_non_json_body(self, make_ctx: Any) -> None:
        transformer = ResponseTransformer()
        ctx = make_ctx()
        await transformer.resolve(ctx)
        view = FlowResponse(PlainTextResponse("plain"))
        await transformer.respond(ctx, view)
        assert view.finalize().body == b"plain"
        assert "X-Request-ID" in view.headers

    async def test_recover_builds_error_envelope(self, make_ctx: Any) -> None:
        transformer = ResponseTransformer()
        ctx = make_ctx()
        await transformer.resolve(ctx)
        response = await transformer.recover(ctx, RuntimeError("boom"))
        assert response is not None
        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error"] == "Internal Server Error"
        assert body["message"] == "An error occurred while processing your request"
        assert body["meta"]["requestId"] == ctx.request_id
        assert response.headers["X-Request-ID"] == ctx.request_id

"""Response envelope: request id, timing headers and the ``meta`` block."""

from __future__ import annotations

import logging
import random
import time
from datetime import datetime, timezone
from typing import Any

from starlette.responses import JSONResponse, Response

from middleware_lab.component import ComponentCategory, FlowComponent
from middleware_lab.context import RequestContext
from middleware_lab.response import FlowResponse

logger = logging.getLogger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_request_id() -> str:
    timestamp = to_base36(int(time.time() * 1000))
    suffix = "".join(random.choices(_BASE36, k=11))
    return f"req_{timestamp}_{suffix}"


class ResponseTransformer(FlowComponent):
    """Stamps every response with a request id and processing time.

    JSON object bodies gain a ``meta`` block. Unhandled endpoint errors are
    turned into a 500 envelope carrying the same metadata.
    """

    category = ComponentCategory.ENVELOPE

    def __init__(self, version: str = "1.0.0", server_name: str = "Middleware-Lab-Demo") -> None:
        self._version = version
        self._server_name = server_name

    async def resolve(self, ctx: RequestContext) -> None:
        ctx.request_id = generate_request_id()
        ctx.started_at = time.perf_counter()
        logger.debug("Request %s started", ctx.request_id)

    def _processing_time(self, ctx: RequestContext) -> str:
        started = ctx.started_at if ctx.started_at is not None else time.perf_counter()
        return f"{(time.perf_counter() - started) * 1000:.2f}ms"

    def _stamp(self, ctx: RequestContext, response: Response, elapsed: str) -> None:
        response.headers["X-Request-ID"] = ctx.request_id or ""
        response.headers["X-Processing-Time"] = elapsed
        response.headers["X-Server"] = self._server_name

    def _meta(self, ctx: RequestContext, elapsed: str) -> dict[str, Any]:
        return {
            "requestId": ctx.request_id,
            "processingTime": elapsed,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": self._version,
        }

    async def respond(self, ctx: RequestContext, response: FlowResponse) -> None:
        elapsed = self._processing_time(ctx)
        self._stamp(ctx, response.raw, elapsed)
        if response.is_json_object:
            response.update(meta=self._meta(ctx, elapsed))
            logger.info("Response %s enriched (%s)", ctx.request_id, elapsed)

    async def recover(self, ctx: RequestContext, exc: Exception) -> Response | None:
        elapsed = self._processing_time(ctx)
        logger.error(
            "Request %s failed: %s", ctx.request_id, exc, exc_info=exc
        )
        response = JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "message": "An error occurred while processing your request",
                "meta": self._meta(ctx, elapsed),
            },
        )
        self._stamp(ctx, response, elapsed)
        return response

    def openapi_spec(self) -> dict[str, Any] | None:
        return {
            "responses": {"500": {"description": "Internal Server Error envelope"}},
            "x-envelope": ["meta"],
        }

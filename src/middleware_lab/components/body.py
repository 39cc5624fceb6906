"""JSON request body parsing."""

from __future__ import annotations

import json
import logging
from typing import Any

from middleware_lab.component import ComponentCategory, FlowComponent
from middleware_lab.context import RequestContext
from middleware_lab.exceptions import MalformedBody

logger = logging.getLogger(__name__)

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class JsonBody(FlowComponent):
    """Parses a JSON body into ``ctx.body``; anything else yields ``{}``."""

    category = ComponentCategory.PAYLOAD

    async def resolve(self, ctx: RequestContext) -> None:
        request = ctx.request
        content_type = request.headers.get("content-type", "")
        if request.method not in _BODY_METHODS or "application/json" not in content_type:
            ctx.body = {}
            return

        raw = await request.body()
        if not raw.strip():
            ctx.body = {}
            return

        try:
            ctx.body = json.loads(raw)
        except ValueError:
            logger.info("Malformed JSON body on %s", request.url.path)
            context = {"requestId": ctx.request_id} if ctx.request_id else None
            raise MalformedBody(context=context)

        if isinstance(ctx.body, dict):
            logger.debug("JSON body with %d fields", len(ctx.body))

    def openapi_spec(self) -> dict[str, Any] | None:
        return {"responses": {"400": {"description": "Malformed JSON body"}}}

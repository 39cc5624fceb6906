"""CORS headers with an explicit origin allow-list."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

ALLOW_METHODS = "GET, POST, PUT, DELETE, PATCH, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization, X-Requested-With, Accept, Origin"
PREFLIGHT_MAX_AGE = "86400"


class CorsMiddleware(BaseHTTPMiddleware):
    """Answers preflight requests and decorates every other response.

    A listed origin is echoed back, a request without an Origin header gets
    ``*`` and any other origin gets no allow-origin header at all.
    """

    def __init__(self, app: ASGIApp, allowed_origins: Iterable[str] = ()) -> None:
        super().__init__(app)
        self.allowed_origins = frozenset(allowed_origins)

    def cors_headers(self, origin: str | None) -> dict[str, str]:
        headers = {
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
            "Access-Control-Allow-Credentials": "true",
        }
        if origin is None:
            headers["Access-Control-Allow-Origin"] = "*"
        elif origin in self.allowed_origins:
            headers["Access-Control-Allow-Origin"] = origin
        else:
            logger.debug("Origin %s not allowed", origin)
        return headers

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        origin = request.headers.get("origin")

        if request.method == "OPTIONS":
            headers = self.cors_headers(origin)
            headers["Access-Control-Max-Age"] = PREFLIGHT_MAX_AGE
            logger.debug("Preflight for %s", request.url.path)
            return Response(status_code=204, headers=headers)

        response = await call_next(request)
        response.headers.update(self.cors_headers(origin))
        return response

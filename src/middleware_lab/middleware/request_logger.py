"""Access log for every request."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("middleware_lab.access")

SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "set-cookie", "x-api-key"})


def _client_ip(request: Request) -> str:
    if request.client and request.client.host:
        return request.client.host
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return "unknown"


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """Logs each request on arrival and its outcome on completion.

    Bodies are never read here; consuming them in a BaseHTTPMiddleware would
    hide them from the endpoint.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()
        method = request.method
        client_ip = _client_ip(request)

        logger.info(
            "[%s] %s %s from %s (%s)",
            datetime.now(timezone.utc).isoformat(),
            method,
            request.url,
            client_ip,
            request.headers.get("user-agent", "unknown"),
        )
        if logger.isEnabledFor(logging.DEBUG):
            safe_headers = {
                key: value
                for key, value in request.headers.items()
                if key not in SENSITIVE_HEADERS
            }
            logger.debug("Headers: %s", safe_headers)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.2fms success=%s",
            method,
            request.url.path,
            status,
            duration_ms,
            status < 400,
            extra={
                "method": method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response

"""Shared pytest fixtures for middleware-lab tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request

from middleware_lab.app import create_app
from middleware_lab.components.throttling import InMemoryThrottleBackend
from middleware_lab.config import Settings
from middleware_lab.context import RequestContext


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def make_request() -> Any:
    """Factory for creating Starlette Request objects from a bare scope."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
        client: tuple[str, int] | None = ("10.0.0.1", 5000),
        body: bytes = b"",
        session: dict[str, Any] | None = None,
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
            "client": client,
        }
        if session is not None:
            scope["session"] = session

        async def receive() -> dict[str, Any]:
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return _make


@pytest.fixture
def make_ctx(make_request: Any) -> Any:
    """Factory for RequestContext around a fresh request."""

    def _make(**kwargs: Any) -> RequestContext:
        return RequestContext(request=make_request(**kwargs))

    return _make


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, secret_key="test-secret", log_level="DEBUG")


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings, throttle_backend=InMemoryThrottleBackend())


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def user_headers() -> dict[str, str]:
    return {"Authorization": "Bearer user-token-123"}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": "Bearer admin-token-456"}

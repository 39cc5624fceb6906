"""Tests for RequestContext."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

from middleware_lab.context import CONTEXT_STATE_KEY, RequestContext, current_context


class TestRequestContext:
    def test_defaults(self, make_request: Any) -> None:
        ctx = RequestContext(request=make_request())
        assert ctx.user is None
        assert ctx.admin is None
        assert ctx.rate_limit is None
        assert ctx.device is None
        assert ctx.feature is None
        assert ctx.session is None
        assert ctx.state == {}

    def test_state_not_shared(self, make_request: Any) -> None:
        first = RequestContext(request=make_request())
        second = RequestContext(request=make_request())
        first.state["x"] = 1
        assert second.state == {}

    def test_client_ip_from_socket(self, make_request: Any) -> None:
        request = make_request(
            client=("192.168.1.5", 1234), headers={"X-Forwarded-For": "1.2.3.4"}
        )
        assert RequestContext(request=request).client_ip == "192.168.1.5"

    def test_client_ip_falls_back_to_forwarded_for(self, make_request: Any) -> None:
        request = make_request(
            client=None, headers={"X-Forwarded-For": "1.2.3.4, 10.0.0.1"}
        )
        assert RequestContext(request=request).client_ip == "1.2.3.4"

    def test_client_ip_unknown(self, make_request: Any) -> None:
        assert RequestContext(request=make_request(client=None)).client_ip == "unknown"

    def test_user_agent(self, make_request: Any) -> None:
        request = make_request(headers={"User-Agent": "curl/8.0"})
        assert RequestContext(request=request).user_agent == "curl/8.0"
        assert RequestContext(request=make_request()).user_agent == ""


class TestCurrentContext:
    def test_returns_attached_context(self, make_request: Any) -> None:
        request = make_request()
        ctx = RequestContext(request=request)
        setattr(request.state, CONTEXT_STATE_KEY, ctx)
        assert current_context(request) is ctx

    def test_returns_none_without_flow(self) -> None:
        request: Any = SimpleNamespace(state=SimpleNamespace())
        assert current_context(request) is None

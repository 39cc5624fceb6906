"""RequestContext: typed per-request state container."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from starlette.requests import Request

from middleware_lab.models import (
    AdminGrant,
    CookieJar,
    DeviceInfo,
    FeatureContext,
    RateLimitStatus,
    SessionInfo,
    User,
)

if TYPE_CHECKING:
    from middleware_lab.component import FlowComponent
    from middleware_lab.flow import ResolvedFlow

CONTEXT_STATE_KEY = "flow_context"


@dataclass
class RequestContext:
    """Per-request state mutated by flow components.

    Each optional field is owned by exactly one component category; it stays
    ``None`` unless that component ran earlier in the flow.
    """

    request: Request
    user: User | None = None
    admin: AdminGrant | None = None
    rate_limit: RateLimitStatus | None = None
    device: DeviceInfo | None = None
    feature: FeatureContext | None = None
    request_id: str | None = None
    started_at: float | None = None
    body: Any = None
    cookies: CookieJar | None = None
    session: SessionInfo | None = None
    flow: ResolvedFlow | None = None
    aborted_by: FlowComponent | None = None
    state: dict[str, Any] = field(default_factory=dict)

    @property
    def client_ip(self) -> str:
        client = self.request.client
        if client is not None and client.host:
            return client.host
        forwarded = self.request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return "unknown"

    @property
    def user_agent(self) -> str:
        return self.request.headers.get("user-agent", "")


def current_context(request: Request) -> RequestContext | None:
    """Return the context a flow dependency attached to this request, if any."""
    return getattr(request.state, CONTEXT_STATE_KEY, None)

"""Value types populated by flow components."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class User:
    id: int
    name: str
    role: str
    email: str


@dataclass(frozen=True)
class FeatureFlag:
    name: str
    enabled: bool
    rollout: int
    requires_auth: bool = False


@dataclass(frozen=True)
class RateLimitTier:
    name: str
    requests: int
    window_seconds: int


@dataclass(frozen=True)
class AdminGrant:
    is_admin: bool
    permissions: tuple[str, ...] = ()


@dataclass(frozen=True)
class RateLimitStatus:
    """Counter state for one client and tier after a rate limit check."""

    tier: str
    limit: int
    count: int
    reset_at: float

    @property
    def remaining(self) -> int:
        return max(self.limit - self.count, 0)

    @property
    def reset_ms(self) -> int:
        return int(self.reset_at * 1000)


@dataclass(frozen=True)
class DeviceInfo:
    type: str
    browser: str
    os: str
    is_bot: bool
    is_mobile: bool
    is_tablet: bool
    user_agent: str
    parsed_at: str


@dataclass(frozen=True)
class FeatureContext:
    name: str
    enabled: bool
    rollout_id: int
    rollout_percentage: int


@dataclass(frozen=True)
class CookieWrite:
    name: str
    value: str
    max_age: int | None = None
    httponly: bool = False
    secure: bool = False
    samesite: str = "lax"
    path: str = "/"


@dataclass
class CookieJar:
    """Incoming cookies plus the writes queued for the response."""

    incoming: dict[str, str] = field(default_factory=dict)
    writes: list[CookieWrite] = field(default_factory=list)
    deletes: list[str] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return list(self.incoming)

    @property
    def sizes(self) -> list[dict[str, Any]]:
        return [
            {"name": name, "size": len(f"{name}={value}")}
            for name, value in self.incoming.items()
        ]

    @property
    def total_size(self) -> int:
        return sum(entry["size"] for entry in self.sizes)

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.incoming.get(name, default)

    def get_json(self, name: str, default: Any = None) -> Any:
        raw = self.incoming.get(name)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            return default

    def set(self, name: str, value: str, **options: Any) -> None:
        self.writes.append(CookieWrite(name=name, value=value, **options))

    def delete(self, *names: str) -> None:
        self.deletes.extend(names)


@dataclass(frozen=True)
class SessionInfo:
    id: str | None
    user: dict[str, Any] | None
    visit_count: int
    last_visit: str | None
    cart_items: int
    flash_messages: dict[str, str | None]

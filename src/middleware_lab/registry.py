"""StageRegistry: builds the named stages routes attach to their flows."""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Any

from fastapi import Depends
from itsdangerous import Signer

from middleware_lab._types import Clock
from middleware_lab.component import FlowComponent
from middleware_lab.components.authentication import BearerAuthentication, TokenDirectory
from middleware_lab.components.body import JsonBody
from middleware_lab.components.cookies import CookieAction, CookieManager
from middleware_lab.components.device import DeviceDetector
from middleware_lab.components.features import FeatureGate
from middleware_lab.components.permissions import HasRole
from middleware_lab.components.sessions import SessionAction, SessionManager
from middleware_lab.components.throttling import (
    InMemoryThrottleBackend,
    RateLimit,
    ThrottleBackend,
)
from middleware_lab.components.transform import ResponseTransformer
from middleware_lab.config import Settings
from middleware_lab.demo_data import (
    ADMIN_PERMISSIONS,
    DEMO_USERS,
    FEATURE_FLAGS,
    RATE_LIMIT_TIERS,
)
from middleware_lab.dependency import flow_dependency
from middleware_lab.exceptions import FlowConfigurationError
from middleware_lab.flow import Flow
from middleware_lab.hooks import FlowHook, LoggingHook
from middleware_lab.models import FeatureFlag, RateLimitTier, User

COOKIE_SALT = "middleware_lab.cookies"


class StageRegistry:
    """Owns the shared state behind the named stages of one application.

    Every rate limit stage built here shares one throttle backend, so two
    routes using the same tier count against the same window.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        users: Mapping[str, User] = DEMO_USERS,
        features: Mapping[str, FeatureFlag] = FEATURE_FLAGS,
        tiers: Mapping[str, RateLimitTier] = RATE_LIMIT_TIERS,
        throttle_backend: ThrottleBackend | None = None,
        clock: Clock = time.time,
    ) -> None:
        self.settings = settings
        self.directory = TokenDirectory(users)
        self.features = features
        self.tiers = tiers
        self.clock = clock
        self.throttle_backend = (
            throttle_backend
            if throttle_backend is not None
            else InMemoryThrottleBackend(clock)
        )
        self.signer = Signer(settings.secret_key, salt=COOKIE_SALT)
        self.hook: FlowHook = LoggingHook()

    def auth(self) -> BearerAuthentication:
        return BearerAuthentication(self.directory.lookup)

    def admin(self) -> HasRole:
        return HasRole("admin", ADMIN_PERMISSIONS)

    def rate_limit(self, tier: str = "default") -> RateLimit:
        try:
            limits = self.tiers[tier]
        except KeyError:
            raise FlowConfigurationError(f"Unknown rate limit tier '{tier}'") from None
        return RateLimit(limits, backend=self.throttle_backend, clock=self.clock)

    def device(self) -> DeviceDetector:
        return DeviceDetector()

    def feature(self, name: str) -> FeatureGate:
        return FeatureGate(name, self.features)

    def transform(self) -> ResponseTransformer:
        return ResponseTransformer(self.settings.app_version, self.settings.server_name)

    def body(self) -> JsonBody:
        return JsonBody()

    def cookies(self, action: CookieAction | str = CookieAction.READ) -> CookieManager:
        return CookieManager(CookieAction(action), self.signer)

    def sessions(self, action: SessionAction | str = SessionAction.READ) -> SessionManager:
        return SessionManager(SessionAction(action))

    def flow(self, *components: FlowComponent | Flow) -> Flow:
        return Flow(*components).add_hook(self.hook)

    def depends(self, *components: FlowComponent | Flow) -> Any:
        """Shorthand for ``Depends(flow_dependency(self.flow(...)))``."""
        return Depends(flow_dependency(self.flow(*components)))

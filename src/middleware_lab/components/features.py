"""Feature flag components."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from middleware_lab.component import ComponentCategory, FlowComponent
from middleware_lab.context import RequestContext
from middleware_lab.exceptions import (
    AuthenticationFailed,
    FeatureDisabled,
    FeatureNotFound,
)
from middleware_lab.models import FeatureContext, FeatureFlag
from middleware_lab.response import FlowResponse

logger = logging.getLogger(__name__)


def rollout_id(seed: str) -> int:
    """32-bit string hash (h * 31 + c, wrapped to a signed int), made positive."""
    h = 0
    for ch in seed:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def rollout_bucket(ip: str, user_agent: str) -> int:
    """Deterministic 0-99 bucket for a client; stable across requests."""
    return rollout_id(ip + user_agent) % 100


class FeatureGate(FlowComponent):
    """Admits the request only if the named flag is on for this client."""

    category = ComponentCategory.FEATURE

    def __init__(self, feature: str, flags: Mapping[str, FeatureFlag]) -> None:
        self._feature = feature
        self._flags = flags

    async def resolve(self, ctx: RequestContext) -> None:
        name = self._feature
        flag = self._flags.get(name)

        if flag is None:
            logger.warning("Unknown feature '%s'", name)
            raise FeatureNotFound(
                f"Feature '{name}' is not configured",
                context={"availableFeatures": list(self._flags)},
            )

        if not flag.enabled:
            logger.info("Feature '%s' is disabled", name)
            raise FeatureDisabled(
                f"Feature '{name}' is currently disabled",
                context={"feature": {"name": name, "enabled": False}},
            )

        bucket = rollout_bucket(ctx.client_ip, ctx.user_agent)
        if bucket >= flag.rollout:
            logger.info(
                "Client not in rollout for '%s' (%d%% vs %d%%)",
                name,
                bucket,
                flag.rollout,
            )
            raise FeatureDisabled(
                f"Feature '{name}' is not available for your account",
                error="Feature not available",
                context={
                    "feature": {
                        "name": name,
                        "enabled": True,
                        "inRollout": False,
                        "rolloutPercentage": flag.rollout,
                    }
                },
            )

        if flag.requires_auth and ctx.user is None:
            logger.info("Feature '%s' requires authentication", name)
            raise AuthenticationFailed(
                f"Feature '{name}' requires user authentication",
                context={"feature": {"name": name, "requiresAuth": True}},
            )

        ctx.feature = FeatureContext(
            name=name,
            enabled=True,
            rollout_id=rollout_id(ctx.client_ip + ctx.user_agent),
            rollout_percentage=flag.rollout,
        )
        logger.info("Feature '%s' is available", name)

    async def respond(self, ctx: RequestContext, response: FlowResponse) -> None:
        feature = ctx.feature
        if feature is None:
            return
        response.headers["X-Feature-Flag"] = feature.name
        response.headers["X-Feature-Enabled"] = "true"
        response.headers["X-Feature-Rollout"] = str(feature.rollout_percentage)

    def openapi_spec(self) -> dict[str, Any] | None:
        return {
            "responses": {
                "403": {"description": "Feature disabled"},
                "404": {"description": "Feature not found"},
            },
            "x-feature-flags": [self._feature],
        }

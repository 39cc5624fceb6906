"""Static demo tables: tokens, feature flags, rate limit tiers.

Everything here is read-only and handed to the components that need it
when the application is built.
"""

from __future__ import annotations

from types import MappingProxyType

from middleware_lab.models import FeatureFlag, RateLimitTier, User

DEMO_USERS = MappingProxyType(
    {
        "user-token-123": User(1, "John Doe", "user", "john@example.com"),
        "admin-token-456": User(2, "Jane Admin", "admin", "jane@example.com"),
        "demo-token-789": User(3, "Demo User", "demo", "demo@example.com"),
    }
)

FEATURE_FLAGS = MappingProxyType(
    {
        "new-api": FeatureFlag("new-api", enabled=True, rollout=100),
        "beta-features": FeatureFlag("beta-features", enabled=True, rollout=50),
        "experimental": FeatureFlag("experimental", enabled=False, rollout=0),
        "premium-features": FeatureFlag(
            "premium-features", enabled=True, rollout=100, requires_auth=True
        ),
    }
)

RATE_LIMIT_TIERS = MappingProxyType(
    {
        "default": RateLimitTier("default", requests=100, window_seconds=15 * 60),
        "strict": RateLimitTier("strict", requests=10, window_seconds=60),
        "generous": RateLimitTier("generous", requests=1000, window_seconds=60 * 60),
    }
)

ADMIN_PERMISSIONS = (
    "read_all_users",
    "delete_users",
    "modify_system_settings",
    "view_analytics",
)

"""Built-in flow components."""

from middleware_lab.components.authentication import BearerAuthentication, TokenDirectory
from middleware_lab.components.body import JsonBody
from middleware_lab.components.cookies import CookieAction, CookieManager, read_signed
from middleware_lab.components.device import DeviceDetector, parse_user_agent
from middleware_lab.components.features import FeatureGate, rollout_bucket
from middleware_lab.components.permissions import HasRole
from middleware_lab.components.sessions import FlashMessages, SessionAction, SessionManager
from middleware_lab.components.throttling import (
    InMemoryThrottleBackend,
    RateLimit,
    ThrottleBackend,
)
from middleware_lab.components.transform import ResponseTransformer

__all__ = [
    "BearerAuthentication",
    "CookieAction",
    "CookieManager",
    "DeviceDetector",
    "FeatureGate",
    "FlashMessages",
    "HasRole",
    "InMemoryThrottleBackend",
    "JsonBody",
    "RateLimit",
    "ResponseTransformer",
    "SessionAction",
    "SessionManager",
    "ThrottleBackend",
    "TokenDirectory",
    "parse_user_agent",
    "read_signed",
    "rollout_bucket",
]

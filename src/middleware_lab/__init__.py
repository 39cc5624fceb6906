"""Middleware Lab - per-route middleware flows for FastAPI."""

from middleware_lab.app import create_app
from middleware_lab.component import ComponentCategory, FlowComponent
from middleware_lab.components import (
    BearerAuthentication,
    CookieAction,
    CookieManager,
    DeviceDetector,
    FeatureGate,
    HasRole,
    InMemoryThrottleBackend,
    JsonBody,
    RateLimit,
    ResponseTransformer,
    SessionAction,
    SessionManager,
    ThrottleBackend,
    TokenDirectory,
)
from middleware_lab.config import Settings, get_settings
from middleware_lab.context import RequestContext, current_context
from middleware_lab.dependency import enrich_openapi, flow_dependency
from middleware_lab.exceptions import (
    AuthenticationFailed,
    FeatureDisabled,
    FeatureNotFound,
    FlowAbort,
    FlowConfigurationError,
    FlowException,
    FlowInternalError,
    MalformedBody,
    PermissionDenied,
    Throttled,
)
from middleware_lab.flow import Flow, ResolvedFlow
from middleware_lab.hooks import (
    AfterComponent,
    AfterFlow,
    BeforeFlow,
    FlowHook,
    LoggingHook,
)
from middleware_lab.registry import StageRegistry
from middleware_lab.response import FlowResponse
from middleware_lab.routing import FlowRoute, FlowRouter

__all__ = [
    "AfterComponent",
    "AfterFlow",
    "AuthenticationFailed",
    "BearerAuthentication",
    "BeforeFlow",
    "ComponentCategory",
    "CookieAction",
    "CookieManager",
    "DeviceDetector",
    "FeatureDisabled",
    "FeatureGate",
    "FeatureNotFound",
    "Flow",
    "FlowAbort",
    "FlowComponent",
    "FlowConfigurationError",
    "FlowException",
    "FlowHook",
    "FlowInternalError",
    "FlowResponse",
    "FlowRoute",
    "FlowRouter",
    "HasRole",
    "InMemoryThrottleBackend",
    "JsonBody",
    "LoggingHook",
    "MalformedBody",
    "PermissionDenied",
    "RateLimit",
    "RequestContext",
    "ResolvedFlow",
    "ResponseTransformer",
    "SessionAction",
    "SessionManager",
    "Settings",
    "StageRegistry",
    "ThrottleBackend",
    "Throttled",
    "TokenDirectory",
    "create_app",
    "current_context",
    "enrich_openapi",
    "flow_dependency",
    "get_settings",
]

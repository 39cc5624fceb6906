"""Application factory."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from middleware_lab.components.throttling import ThrottleBackend
from middleware_lab.config import Settings, get_settings
from middleware_lab.demo_data import DEMO_USERS, FEATURE_FLAGS
from middleware_lab.logging_config import setup_logging
from middleware_lab.middleware import (
    CorsMiddleware,
    RequestLoggerMiddleware,
    SecurityHeadersMiddleware,
)
from middleware_lab.models import FeatureFlag, User
from middleware_lab.registry import StageRegistry
from middleware_lab.routes import include_routes
from middleware_lab.routing import FlowRoute

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    users: Mapping[str, User] = DEMO_USERS,
    features: Mapping[str, FeatureFlag] = FEATURE_FLAGS,
    throttle_backend: ThrottleBackend | None = None,
) -> FastAPI:
    """Build the demo application.

    Global middleware runs in this order on the way in: request logger,
    security headers, CORS, session. Route flows run inside all of them.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
    )
    app.router.route_class = FlowRoute
    app.state.settings = settings

    # Added innermost first
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age,
    )
    app.add_middleware(CorsMiddleware, allowed_origins=settings.cors_origins_list)
    app.add_middleware(SecurityHeadersMiddleware, server_name=settings.server_name)
    app.add_middleware(RequestLoggerMiddleware)

    stages = StageRegistry(
        settings,
        users=users,
        features=features,
        throttle_backend=throttle_backend,
    )
    app.state.stages = stages
    include_routes(app, stages)

    logger.info("%s %s ready", settings.app_name, settings.app_version)
    return app

"""Authentication components: bearer token lookup."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from middleware_lab._types import TokenLookup
from middleware_lab.component import ComponentCategory, FlowComponent
from middleware_lab.context import RequestContext
from middleware_lab.exceptions import AuthenticationFailed
from middleware_lab.models import User

logger = logging.getLogger(__name__)


class TokenDirectory:
    """Immutable token → user table."""

    def __init__(self, users: Mapping[str, User]) -> None:
        self._users = MappingProxyType(dict(users))

    async def lookup(self, token: str) -> User | None:
        return self._users.get(token)


class BearerAuthentication(FlowComponent):
    """Reads a token from the Authorization header or ``token`` query parameter."""

    category = ComponentCategory.AUTHENTICATION

    def __init__(
        self,
        lookup: TokenLookup,
        *,
        scheme: str = "Bearer",
        header: str = "Authorization",
        query_param: str = "token",
    ) -> None:
        self._lookup = lookup
        self._prefix = f"{scheme} "
        self._scheme = scheme
        self._header = header
        self._query_param = query_param

    def _extract(self, ctx: RequestContext) -> str | None:
        raw = ctx.request.headers.get(self._header) or ctx.request.query_params.get(
            self._query_param
        )
        if not raw:
            return None
        if raw.startswith(self._prefix):
            raw = raw[len(self._prefix) :]
        return raw.strip() or None

    async def resolve(self, ctx: RequestContext) -> None:
        token = self._extract(ctx)
        if token is None:
            logger.info("No token provided")
            raise AuthenticationFailed(
                context={"hint": f"Add {self._header} header or {self._query_param} parameter"}
            )

        user = await self._lookup(token)
        if user is None:
            logger.info("Invalid token")
            raise AuthenticationFailed(
                "The provided token is not valid", error="Invalid token"
            )

        ctx.user = user
        logger.info("User authenticated - %s (%s)", user.name, user.role)

    def openapi_spec(self) -> dict[str, Any] | None:
        return {
            "security_schemes": {
                "BearerToken": {"type": "http", "scheme": self._scheme.lower()},
                "TokenQuery": {
                    "type": "apiKey",
                    "in": "query",
                    "name": self._query_param,
                },
            },
            "security": [{"BearerToken": []}, {"TokenQuery": []}],
            "responses": {"401": {"description": "Authentication failed"}},
        }

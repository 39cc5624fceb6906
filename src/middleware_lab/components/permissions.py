"""Permission components: HasRole."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from middleware_lab.component import ComponentCategory, FlowComponent
from middleware_lab.context import RequestContext
from middleware_lab.exceptions import AuthenticationFailed, PermissionDenied
from middleware_lab.models import AdminGrant

logger = logging.getLogger(__name__)


class HasRole(FlowComponent):
    """Checks ctx.user has the given role and records the granted permissions."""

    category = ComponentCategory.PERMISSION
    requires = frozenset({ComponentCategory.AUTHENTICATION})

    def __init__(self, role: str = "admin", permissions: Iterable[str] = ()) -> None:
        self._role = role
        self._permissions = tuple(permissions)

    async def resolve(self, ctx: RequestContext) -> None:
        user = ctx.user
        if user is None:
            logger.warning("No user in context, authentication must run first")
            raise AuthenticationFailed(
                f"User must be authenticated before checking {self._role} access",
                context={"hint": "Add an authentication component to the flow"},
            )

        if user.role != self._role:
            logger.info("Access denied for %s (role: %s)", user.name, user.role)
            raise PermissionDenied(
                f"{self._role.capitalize()} access required",
                context={
                    "user": {
                        "name": user.name,
                        "role": user.role,
                        "requiredRole": self._role,
                    }
                },
            )

        ctx.admin = AdminGrant(is_admin=True, permissions=self._permissions)
        logger.info("%s access granted for %s", self._role, user.name)

    def openapi_spec(self) -> dict[str, Any] | None:
        return {
            "responses": {"403": {"description": "Insufficient privileges"}},
            "x-roles": [self._role],
        }

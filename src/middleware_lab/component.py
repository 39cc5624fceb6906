"""FlowComponent abstract base class and ComponentCategory enum."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from starlette.responses import Response

from middleware_lab.context import RequestContext

if TYPE_CHECKING:
    from middleware_lab.response import FlowResponse


class ComponentCategory(Enum):
    """Processing component categories, defining strict execution order."""

    ENVELOPE = "envelope"
    AUTHENTICATION = "authentication"
    PERMISSION = "permission"
    THROTTLING = "throttling"
    DETECTION = "detection"
    FEATURE = "feature"
    STATE = "state"
    PAYLOAD = "payload"
    CUSTOM = "custom"

    @property
    def order(self) -> int:
        _ORDER = {
            "envelope": 0,
            "authentication": 1,
            "permission": 2,
            "throttling": 3,
            "detection": 4,
            "feature": 5,
            "state": 6,
            "payload": 7,
            "custom": 8,
        }
        return _ORDER[self.value]


class FlowComponent(ABC):
    """Base abstraction for all processing units in a flow.

    ``resolve`` runs before the endpoint in category order; ``respond`` runs
    after it in reverse order. ``requires`` lists categories that must be
    present in the same flow, checked when the flow is resolved.
    """

    category: ClassVar[ComponentCategory]
    requires: ClassVar[frozenset[ComponentCategory]] = frozenset()

    @abstractmethod
    async def resolve(self, ctx: RequestContext) -> None: ...

    async def respond(self, ctx: RequestContext, response: FlowResponse) -> None:
        pass

    async def recover(self, ctx: RequestContext, exc: Exception) -> Response | None:
        return None

    def openapi_spec(self) -> dict[str, Any] | None:
        return None

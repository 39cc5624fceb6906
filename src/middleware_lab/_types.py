"""Shared type aliases."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from middleware_lab.context import RequestContext
from middleware_lab.models import User

# Resolves a bearer token to a user, or None when the token is unknown
TokenLookup = Callable[[str], Awaitable[User | None]]
# Wall-clock source in epoch seconds, injectable for tests
Clock = Callable[[], float]
# Derives the rate limit bucket for a request
KeyFunc = Callable[[RequestContext], str]

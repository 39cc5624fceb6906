"""FlowException hierarchy for controlled flow aborts."""

from __future__ import annotations

from typing import Any


class FlowException(Exception):
    """Base for all flow exceptions."""


class FlowConfigurationError(FlowException):
    """A flow was composed without a component another one depends on."""


class FlowAbort(FlowException):
    """Controlled abort with HTTP status code, error title and detail."""

    def __init__(
        self,
        detail: str,
        *,
        status_code: int = 400,
        error: str = "Bad request",
        context: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail
        self.error = error
        self.context = context or {}
        self.headers = headers or {}

    def payload(self) -> dict[str, Any]:
        return {"error": self.error, "message": self.detail, **self.context}


class AuthenticationFailed(FlowAbort):
    """Authentication check failed (401)."""

    def __init__(
        self,
        detail: str = "Please provide an authentication token",
        *,
        error: str = "Authentication required",
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail, status_code=401, error=error, context=context)


class PermissionDenied(FlowAbort):
    """Permission or role check failed (403)."""

    def __init__(
        self,
        detail: str = "Admin access required",
        *,
        error: str = "Insufficient privileges",
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail, status_code=403, error=error, context=context)


class FeatureNotFound(FlowAbort):
    """Feature flag is not configured (404)."""

    def __init__(self, detail: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(
            detail, status_code=404, error="Feature not found", context=context
        )


class FeatureDisabled(FlowAbort):
    """Feature flag is disabled or the client is outside its rollout (403)."""

    def __init__(
        self,
        detail: str = "Feature disabled",
        *,
        error: str = "Feature disabled",
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail, status_code=403, error=error, context=context)


class Throttled(FlowAbort):
    """Rate limit exceeded (429)."""

    def __init__(
        self,
        detail: str = "Too many requests",
        *,
        retry_after: int | None = None,
        context: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        headers = dict(headers or {})
        if retry_after is not None:
            headers["Retry-After"] = str(retry_after)
        super().__init__(
            detail,
            status_code=429,
            error="Rate limit exceeded",
            context=context,
            headers=headers,
        )
        self.retry_after = retry_after


class MalformedBody(FlowAbort):
    """Request body could not be parsed (400)."""

    def __init__(
        self,
        detail: str = "Request body contains malformed JSON",
        *,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail, status_code=400, error="Invalid JSON", context=context)


class FlowInternalError(FlowException):
    """Engine-level error wrapping unexpected exceptions."""

    def __init__(self, detail: str, *, cause: Exception | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.cause = cause

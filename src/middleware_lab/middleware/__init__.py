"""Global middleware applied to every request."""

from middleware_lab.middleware.cors import CorsMiddleware
from middleware_lab.middleware.request_logger import RequestLoggerMiddleware
from middleware_lab.middleware.security import SecurityHeadersMiddleware

__all__ = ["CorsMiddleware", "RequestLoggerMiddleware", "SecurityHeadersMiddleware"]

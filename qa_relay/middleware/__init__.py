"""ASGI middleware."""

from qa_relay.middleware.logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]

"""ASGI middleware."""

from ecomind.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]

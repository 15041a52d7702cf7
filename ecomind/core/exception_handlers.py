"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Every failure body has the
shape ``{"error": <kind>, "message": <text>, "details": {...}}``.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ecomind.core.config import get_settings
from ecomind.domain.exceptions import EcoMindException

logger = logging.getLogger(__name__)

# Map domain error kind to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "unauthenticated": 401,
    "permission-denied": 403,
    "invalid-argument": 400,
    "not-found": 404,
    "failed-precondition": 400,
    "aborted": 409,
    "internal": 500,
}

# Starlette HTTP status -> error kind, for errors raised by the framework itself.
_STATUS_ERROR_CODE: dict[int, str] = {
    401: "unauthenticated",
    403: "permission-denied",
    404: "not-found",
    405: "invalid-argument",
    409: "aborted",
}


def _ecomind_exception_handler(request: Request, exc: EcoMindException) -> JSONResponse:
    """Return JSON from EcoMindException.to_dict() with the status for its kind."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if status >= 500:
        logger.error("Request failed: %s", exc.message, extra={"path": request.url.path})
    return JSONResponse(status_code=status, content=exc.to_dict())


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Schema validation failures are invalid-argument (400)."""
    return JSONResponse(
        status_code=400,
        content={
            "error": "invalid-argument",
            "message": "Request validation failed",
            "details": {"errors": jsonable_encoder(exc.errors())},
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": _STATUS_ERROR_CODE.get(exc.status_code, "internal" if exc.status_code >= 500 else "invalid-argument"),
            "message": str(exc.detail),
            "details": {},
        },
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", type(exc).__name__)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "internal", "message": detail, "details": {}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: EcoMindException (and
    subclasses), RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(EcoMindException, _ecomind_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)

"""Caller checks and the consent-gated AI runner shared by the use cases."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any, TypeVar

from ecomind.application.dtos.user import AuthenticatedUser
from ecomind.application.services.consent_gate import ConsentGate
from ecomind.domain.enums import AIOperation
from ecomind.domain.exceptions import (
    EcoMindException,
    InternalException,
    PermissionDeniedException,
    UnauthenticatedException,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def require_owner(
    actor: AuthenticatedUser | None, user_id: str, message: str = "Unauthorized"
) -> AuthenticatedUser:
    """Return actor if it is authenticated and acting on its own data."""
    if actor is None:
        raise UnauthenticatedException()
    if not user_id or actor.uid != user_id:
        raise PermissionDeniedException(message, reason="identity_mismatch")
    return actor


def to_jsonable(value: Any) -> Any:
    """Recursively convert stored document values (datetimes, bytes) into JSON-safe values."""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.hex()
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


async def run_consented_ai_operation(
    gate: ConsentGate,
    operation: AIOperation,
    user_id: str,
    input_length: int,
    failure_message: str,
    action: Callable[[], Awaitable[T]],
) -> T:
    """Run action behind the consent gate, logging latency and input size (never content).

    Typed errors pass through unchanged; anything else becomes InternalException.
    """
    started = time.perf_counter()
    runner = gate.with_consent(operation.value)
    try:
        result = await runner(user_id, action)
    except EcoMindException:
        raise
    except Exception as e:
        logger.error(
            "AI operation failed",
            extra={
                "user_id": user_id,
                "operation": operation.value,
                "latency_ms": int((time.perf_counter() - started) * 1000),
                "input_length": input_length,
                "error_type": type(e).__name__,
            },
        )
        raise InternalException(failure_message, operation=operation.value) from e
    logger.info(
        "AI operation completed",
        extra={
            "user_id": user_id,
            "operation": operation.value,
            "latency_ms": int((time.perf_counter() - started) * 1000),
            "input_length": input_length,
        },
    )
    return result

"""Audit logger: best-effort writer for the append-only audit trail.

Contract: a failure to write an audit record never fails the calling
operation. It is logged at ERROR and swallowed; callers get ``None`` back
instead of the record key.
"""

from __future__ import annotations

import logging
from typing import Any

from ecomind.application.interfaces.repositories import IAuditLogRepository
from ecomind.shared.utils.datetime import utc_now
from ecomind.shared.utils.generators import audit_record_key

logger = logging.getLogger(__name__)


class AuditLogger:
    """Writes audit records keyed ``{operation_kind}_{epoch_ms}_{cuid}``."""

    def __init__(self, audit_repo: IAuditLogRepository) -> None:
        self._repo = audit_repo

    async def record(
        self, user_id: str, operation_kind: str, entry: dict[str, Any]
    ) -> str | None:
        """Append an entry to users/{user_id}/_audit. Returns the key, or None if the write failed."""
        try:
            key = audit_record_key(operation_kind)
            await self._repo.append(user_id, key, self._stamp(operation_kind, entry))
        except Exception:
            logger.exception(
                "Failed to write audit record",
                extra={"user_id": user_id, "operation": operation_kind},
            )
            return None
        return key

    async def record_account_event(
        self, user_id: str, operation_kind: str, entry: dict[str, Any]
    ) -> str | None:
        """Append an account-level entry to the top-level _audit collection (same swallow contract)."""
        try:
            key = audit_record_key(f"{operation_kind}_{user_id}")
            await self._repo.append_account_event(
                key, {"uid": user_id, **self._stamp(operation_kind, entry)}
            )
        except Exception:
            logger.exception(
                "Failed to write account audit record",
                extra={"user_id": user_id, "operation": operation_kind},
            )
            return None
        return key

    @staticmethod
    def _stamp(operation_kind: str, entry: dict[str, Any]) -> dict[str, Any]:
        return {"operation": operation_kind, **entry, "timestamp": utc_now()}

"""Consent gate: refuses AI operations for users without current AI-processing consent.

``check_consent`` never raises; its boolean is the only contract (log lines
are for operators, not for callers). ``with_consent`` audits the intent
BEFORE running the wrapped operation, so an audit trail exists even when the
operation fails afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from ecomind.application.services.audit_logger import AuditLogger
from ecomind.application.services.privacy_settings_store import PrivacySettingsStore
from ecomind.domain.exceptions import PermissionDeniedException

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONSENT_REQUIRED_MESSAGE = (
    "AI processing consent required. Please enable AI features in your privacy settings."
)
AI_OPERATION_AUDIT_KIND = "ai_operation"
AI_DATA_TYPES: tuple[str, ...] = ("relationship_data", "interaction_notes")
AI_PURPOSES: tuple[str, ...] = ("relationship_insights", "ai_suggestions")


class ConsentGate:
    """Checks and enforces per-user AI-processing consent."""

    def __init__(self, store: PrivacySettingsStore, audit: AuditLogger) -> None:
        self._store = store
        self._audit = audit

    async def check_consent(self, user_id: str) -> bool:
        """Return True only if settings exist, aiProcessing is on and the consent version is current."""
        try:
            stored = await self._store.find(user_id)
        except Exception:
            logger.exception("Privacy consent check failed", extra={"user_id": user_id})
            return False
        if stored is None:
            logger.warning("No privacy settings found for user %s", user_id)
            return False
        settings = stored.settings
        if not settings.ai_processing:
            logger.info("AI processing not consented for user %s", user_id)
            return False
        if not self._store.is_current(settings):
            logger.warning(
                "Outdated consent version for user %s: %s",
                user_id,
                settings.consent_version,
            )
            return False
        return True

    def with_consent(
        self, operation_name: str
    ) -> Callable[[str, Callable[[], Awaitable[T]]], Awaitable[T]]:
        """Return a runner ``(user_id, operation) -> result`` guarded by consent.

        Without consent: PermissionDeniedException, operation never called.
        With consent: one audit record, then the operation; its result or
        exception is passed through unchanged.
        """

        async def run(user_id: str, operation: Callable[[], Awaitable[T]]) -> T:
            if not await self.check_consent(user_id):
                raise PermissionDeniedException(
                    CONSENT_REQUIRED_MESSAGE, reason="consent_required"
                )
            await self._audit.record(
                user_id,
                AI_OPERATION_AUDIT_KIND,
                {
                    "operation": operation_name,
                    "dataTypes": list(AI_DATA_TYPES),
                    "purposes": list(AI_PURPOSES),
                    "consentVerified": True,
                },
            )
            logger.info("AI operation logged for user %s: %s", user_id, operation_name)
            return await operation()

        return run

"""Privacy use cases: consent settings, GDPR deletion requests and data export."""

from __future__ import annotations

import csv
import dataclasses
import io
import json
import logging
from typing import Any

from ecomind.application.dtos.privacy import PRIVACY_FLAGS, DeletionRequest
from ecomind.application.dtos.user import AuthenticatedUser
from ecomind.application.interfaces.repositories import (
    ConcurrentModificationError,
    IDeletionRequestRepository,
    IUserDataRepository,
    IUserProfileRepository,
)
from ecomind.application.services.audit_logger import AuditLogger
from ecomind.application.services.privacy_settings_store import PrivacySettingsStore
from ecomind.application.use_cases._guards import require_owner, to_jsonable
from ecomind.domain.collections import (
    SUBCOLLECTION_PROMPTS,
    SUBCOLLECTION_RELATIONSHIPS,
    SUBCOLLECTION_SETTINGS,
)
from ecomind.domain.enums import DeletionRequestStatus, ExportFormat
from ecomind.domain.exceptions import (
    AbortedException,
    EcoMindException,
    InternalException,
    InvalidArgumentException,
)
from ecomind.shared.request_audit import RequestMetadata
from ecomind.shared.utils.datetime import epoch_millis, utc_now

logger = logging.getLogger(__name__)

MAX_SETTINGS_WRITE_ATTEMPTS = 3
DEFAULT_DELETION_REASON = "User requested deletion"
DELETION_REQUESTED_MESSAGE = (
    "Your data deletion request has been received and will be processed "
    "within 30 days as required by GDPR."
)

# camelCase document flag -> PrivacySettings attribute
_FLAG_ATTRIBUTES: dict[str, str] = {
    "dataCollection": "data_collection",
    "aiProcessing": "ai_processing",
    "analytics": "analytics",
    "crashReporting": "crash_reporting",
    "marketing": "marketing",
}


def _validated_flags(partial: dict[str, Any]) -> dict[str, bool]:
    """Return the known consent flags from partial; non-boolean values are rejected."""
    flags: dict[str, bool] = {}
    for key in PRIVACY_FLAGS:
        if key not in partial:
            continue
        value = partial[key]
        if not isinstance(value, bool):
            raise InvalidArgumentException(f"{key} must be a boolean", field=key)
        flags[key] = value
    return flags


def _rows_to_csv(rows: list[dict[str, Any]]) -> str:
    """Render documents as CSV; nested values are JSON-encoded into their cell."""
    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=columns, extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(
            {
                k: json.dumps(v, sort_keys=True) if isinstance(v, (dict, list)) else v
                for k, v in row.items()
            }
        )
    return buf.getvalue()


class PrivacyService:
    """Consent settings and GDPR rights for the calling user."""

    def __init__(
        self,
        store: PrivacySettingsStore,
        audit: AuditLogger,
        profile_repo: IUserProfileRepository,
        user_data_repo: IUserDataRepository,
        deletion_repo: IDeletionRequestRepository,
    ) -> None:
        self._store = store
        self._audit = audit
        self._profile_repo = profile_repo
        self._user_data_repo = user_data_repo
        self._deletion_repo = deletion_repo

    async def get_privacy_settings(
        self, actor: AuthenticatedUser | None, user_id: str
    ) -> dict[str, Any]:
        """Return the caller's settings, creating conservative defaults on first read."""
        require_owner(actor, user_id)
        try:
            stored, created = await self._store.get_or_create(user_id)
        except EcoMindException:
            raise
        except Exception as e:
            logger.exception("Get privacy settings failed", extra={"user_id": user_id})
            raise InternalException("Failed to get privacy settings", operation="get_privacy_settings") from e
        return {
            "settings": stored.settings.to_response(),
            "isDefault": created,
            "consentCurrent": self._store.is_current(stored.settings),
        }

    async def update_privacy_settings(
        self,
        actor: AuthenticatedUser | None,
        user_id: str,
        partial: dict[str, Any],
        request_meta: RequestMetadata | None = None,
    ) -> dict[str, Any]:
        """Merge the supplied consent flags and re-stamp the current consent version.

        The write is a compare-and-swap on the stored version; a lost race is
        re-read and re-merged, and after MAX_SETTINGS_WRITE_ATTEMPTS the call
        fails with AbortedException.
        """
        require_owner(actor, user_id)
        if not isinstance(partial, dict):
            raise InvalidArgumentException("Settings payload must be an object", field="settings")
        flags = _validated_flags(partial)
        try:
            for attempt in range(1, MAX_SETTINGS_WRITE_ATTEMPTS + 1):
                stored, _ = await self._store.get_or_create(user_id)
                previous = stored.settings
                now = utc_now()
                updated = dataclasses.replace(
                    previous,
                    **{_FLAG_ATTRIBUTES[k]: v for k, v in flags.items()},
                    last_updated=now,
                    consent_version=self._store.consent_version,
                )
                try:
                    await self._store.save(user_id, updated, stored.version)
                except ConcurrentModificationError:
                    logger.info(
                        "Privacy settings write conflict; retrying",
                        extra={"user_id": user_id, "attempt": attempt},
                    )
                    continue
                break
            else:
                raise AbortedException("privacy_settings", user_id, MAX_SETTINGS_WRITE_ATTEMPTS)
        except EcoMindException:
            raise
        except Exception as e:
            logger.exception("Update privacy settings failed", extra={"user_id": user_id})
            raise InternalException(
                "Failed to update privacy settings", operation="update_privacy_settings"
            ) from e

        meta = request_meta or RequestMetadata()
        await self._audit.record(
            user_id,
            "privacy_update",
            {
                "dataTypes": ["privacy_settings"],
                "purposes": ["consent_management"],
                "previousSettings": previous.to_document(),
                "newSettings": updated.to_document(),
                "changedFields": list(partial.keys()),
                **meta.to_audit_fields(),
            },
        )
        logger.info("Privacy settings updated", extra={"user_id": user_id})
        return {
            "success": True,
            "settings": updated.to_response(),
            "updatedAt": now.isoformat(),
        }

    async def request_data_deletion(
        self,
        actor: AuthenticatedUser | None,
        user_id: str,
        reason: str | None = None,
        request_meta: RequestMetadata | None = None,
    ) -> dict[str, Any]:
        """Record a pending erasure request (processed later by the deletion worker)."""
        caller = require_owner(actor, user_id)
        meta = request_meta or RequestMetadata()
        now = utc_now()
        request = DeletionRequest(
            id=f"deletion_{user_id}_{epoch_millis(now)}",
            user_id=user_id,
            user_email=caller.email,
            reason=(reason or "").strip() or DEFAULT_DELETION_REASON,
            requested_at=now,
            status=DeletionRequestStatus.PENDING.value,
        )
        try:
            await self._deletion_repo.create(
                request.id, request.to_document(meta.ip_address, meta.user_agent)
            )
        except Exception as e:
            logger.exception("Data deletion request failed", extra={"user_id": user_id})
            raise InternalException(
                "Failed to process deletion request", operation="request_data_deletion"
            ) from e

        await self._audit.record(
            user_id,
            "deletion_request",
            {
                "dataTypes": ["all_user_data"],
                "purposes": ["gdpr_erasure"],
                "deletionId": request.id,
                "reason": request.reason,
                "requestedAt": now,
                "gdprCompliant": True,
                **meta.to_audit_fields(),
            },
        )
        logger.info("Data deletion requested", extra={"user_id": user_id, "deletion_id": request.id})
        return {
            "success": True,
            "deletionId": request.id,
            "message": DELETION_REQUESTED_MESSAGE,
            "requestedAt": now.isoformat(),
        }

    async def export_user_data(
        self,
        actor: AuthenticatedUser | None,
        user_id: str,
        export_format: str = ExportFormat.JSON.value,
        request_meta: RequestMetadata | None = None,
    ) -> dict[str, Any]:
        """Collect the caller's profile, relationships, prompts and settings for download."""
        require_owner(actor, user_id)
        if export_format not in ExportFormat.values():
            raise InvalidArgumentException(
                f"format must be one of {ExportFormat.values()}", field="format"
            )
        now = utc_now()
        try:
            profile = await self._profile_repo.get(user_id) or {}
            relationships = await self._user_data_repo.list_documents(user_id, SUBCOLLECTION_RELATIONSHIPS)
            prompts = await self._user_data_repo.list_documents(user_id, SUBCOLLECTION_PROMPTS)
            settings = await self._user_data_repo.list_documents(user_id, SUBCOLLECTION_SETTINGS)
        except Exception as e:
            logger.exception("Data export failed", extra={"user_id": user_id})
            raise InternalException("Failed to export data", operation="export_user_data") from e

        data: dict[str, Any] = {
            "profile": to_jsonable(profile),
            "relationships": [to_jsonable({"id": doc_id, **doc}) for doc_id, doc in relationships],
            "prompts": [to_jsonable({"id": doc_id, **doc}) for doc_id, doc in prompts],
            "settings": {doc_id: to_jsonable(doc) for doc_id, doc in settings},
            "exportedAt": now.isoformat(),
            "format": export_format,
        }
        if export_format == ExportFormat.CSV.value:
            data["csv"] = {
                "relationships": _rows_to_csv(data["relationships"]),
                "prompts": _rows_to_csv(data["prompts"]),
            }

        meta = request_meta or RequestMetadata()
        await self._audit.record(
            user_id,
            "data_export",
            {
                "dataTypes": ["profile", "relationships", "prompts", "settings"],
                "purposes": ["gdpr_portability"],
                "exportedAt": now,
                "format": export_format,
                "recordCounts": {
                    "relationships": len(relationships),
                    "prompts": len(prompts),
                    "settings": len(settings),
                },
                "gdprCompliant": True,
                **meta.to_audit_fields(),
            },
        )
        logger.info("Data export completed", extra={"user_id": user_id, "format": export_format})
        return {"success": True, "data": data, "exportedAt": now.isoformat()}


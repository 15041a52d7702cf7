"""DTOs for privacy settings and deletion requests (stored documents use camelCase keys)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ecomind.shared.utils.datetime import ensure_utc, utc_now

# Client-mutable consent flags, as stored in users/{uid}/settings/privacy.
PRIVACY_FLAGS: tuple[str, ...] = (
    "dataCollection",
    "aiProcessing",
    "analytics",
    "crashReporting",
    "marketing",
)


@dataclass(frozen=True)
class PrivacySettings:
    """Per-user consent record."""

    data_collection: bool
    ai_processing: bool
    analytics: bool
    crash_reporting: bool
    marketing: bool
    last_updated: datetime
    consent_version: str

    @classmethod
    def defaults(cls, consent_version: str, now: datetime | None = None) -> PrivacySettings:
        """Conservative defaults: basic data collection and crash reports only; AI is opt-in."""
        return cls(
            data_collection=True,
            ai_processing=False,
            analytics=False,
            crash_reporting=True,
            marketing=False,
            last_updated=now or utc_now(),
            consent_version=consent_version,
        )

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> PrivacySettings:
        """Build from a stored document; missing flags read as False."""
        last_updated = data.get("lastUpdated")
        if isinstance(last_updated, str):
            last_updated = datetime.fromisoformat(last_updated)
        return cls(
            data_collection=bool(data.get("dataCollection", False)),
            ai_processing=bool(data.get("aiProcessing", False)),
            analytics=bool(data.get("analytics", False)),
            crash_reporting=bool(data.get("crashReporting", False)),
            marketing=bool(data.get("marketing", False)),
            last_updated=ensure_utc(last_updated) or utc_now(),
            consent_version=str(data.get("consentVersion") or ""),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "dataCollection": self.data_collection,
            "aiProcessing": self.ai_processing,
            "analytics": self.analytics,
            "crashReporting": self.crash_reporting,
            "marketing": self.marketing,
            "lastUpdated": self.last_updated,
            "consentVersion": self.consent_version,
        }

    def to_response(self) -> dict[str, Any]:
        """JSON-serializable form returned to callers."""
        doc = self.to_document()
        doc["lastUpdated"] = self.last_updated.isoformat()
        return doc


@dataclass(frozen=True)
class StoredPrivacySettings:
    """Settings plus the store's version token (Firestore updateTime) for compare-and-swap."""

    settings: PrivacySettings
    version: str | None


@dataclass(frozen=True)
class DeletionRequest:
    """A pending or processed GDPR erasure request (_deletion_requests/{id})."""

    id: str
    user_id: str
    user_email: str | None
    reason: str
    requested_at: datetime
    status: str

    def to_document(self, ip_address: str | None = None, user_agent: str | None = None) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "userEmail": self.user_email,
            "reason": self.reason,
            "requestedAt": self.requested_at,
            "status": self.status,
            "completedAt": None,
            "ipAddress": ip_address,
            "userAgent": user_agent,
        }

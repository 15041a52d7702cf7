"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
Documents are plain dicts keyed the way the mobile client stores them (camelCase).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ecomind.application.dtos.privacy import PrivacySettings, StoredPrivacySettings


class ConcurrentModificationError(Exception):
    """A conditional write lost to another writer (document changed or already exists)."""


@dataclass(frozen=True)
class DocumentTarget:
    """A user-owned document addressed relative to users/{uid}.

    ``subcollection=None`` addresses the root profile document itself.
    """

    subcollection: str | None
    document_id: str


# Consent store
class IPrivacySettingsRepository(Protocol):
    """Protocol for the per-user privacy settings document (users/{uid}/settings/privacy)."""

    async def get(self, user_id: str) -> StoredPrivacySettings | None:
        """Return settings and their version token, or None if absent."""

    async def create(self, user_id: str, settings: PrivacySettings) -> str | None:
        """Create the document and return its version token; ConcurrentModificationError if it exists."""

    async def replace(self, user_id: str, settings: PrivacySettings, version: str | None) -> str | None:
        """Overwrite if the stored version still equals ``version`` (None: unconditionally).

        Returns the new version token; raises ConcurrentModificationError on mismatch.
        """


# Audit trail
class IAuditLogRepository(Protocol):
    """Protocol for the append-only audit trail."""

    async def append(self, user_id: str, key: str, entry: dict[str, Any]) -> None:
        """Write entry at users/{user_id}/_audit/{key}."""

    async def append_account_event(self, key: str, entry: dict[str, Any]) -> None:
        """Write entry at _audit/{key} (account-level events that outlive the user subtree)."""


# Profiles
class IUserProfileRepository(Protocol):
    """Protocol for users/{uid} profile documents."""

    async def get(self, user_id: str) -> dict[str, Any] | None:
        """Return the profile document or None."""

    async def create(self, user_id: str, profile: dict[str, Any]) -> None:
        """Write the full profile document."""

    async def update_fields(self, user_id: str, fields: dict[str, Any]) -> None:
        """Merge top-level or dotted-path fields; raise KeyError if the profile is missing."""

    async def increment_stats(
        self,
        user_id: str,
        relationships_change: int | None,
        interactions_change: int | None,
        last_active_at: datetime | None,
    ) -> None:
        """Atomically add to stats counters and/or set stats.lastActiveAt; KeyError if missing."""


# Relationship history used by the AI operations
class IRelationshipRepository(Protocol):
    """Protocol for users/{uid}/relationships/{personId} and its history subcollections."""

    async def get_relationship(self, user_id: str, person_id: str) -> dict[str, Any] | None:
        """Return the relationship document or None."""

    async def recent_history(
        self, user_id: str, person_id: str, subcollection: str, order_field: str, limit: int
    ) -> list[dict[str, Any]]:
        """Return up to ``limit`` documents of a history subcollection, newest first."""

    async def append_history(
        self, user_id: str, person_id: str, subcollection: str, document: dict[str, Any]
    ) -> str:
        """Append a write-once history document; return its generated id."""


# Whole-account export and erasure
class IUserDataRepository(Protocol):
    """Protocol for enumerating and erasing everything under users/{uid}."""

    async def list_documents(self, user_id: str, subcollection: str) -> list[tuple[str, dict[str, Any]]]:
        """Return (document_id, data) for every document of a per-user subcollection."""

    async def delete_documents(
        self, user_id: str, targets: list[DocumentTarget], batch_limit: int
    ) -> int:
        """Delete the targets with batched commits (at most batch_limit per commit); return commit count."""


# Deletion requests
class IDeletionRequestRepository(Protocol):
    """Protocol for _deletion_requests/{id}."""

    async def create(self, request_id: str, document: dict[str, Any]) -> None:
        """Write a new request document."""

    async def get(self, request_id: str) -> dict[str, Any] | None:
        """Return the request document or None."""

    async def update_status(self, request_id: str, fields: dict[str, Any]) -> None:
        """Merge status fields into the request document."""

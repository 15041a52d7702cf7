"""Firestore-backed audit trail (implements IAuditLogRepository)."""

from __future__ import annotations

from typing import Any

from ecomind.domain.collections import COLLECTION_AUDIT, COLLECTION_USERS, SUBCOLLECTION_AUDIT
from ecomind.infrastructure.firebase._rest_client import FirestoreRESTClient


class FirestoreAuditLogRepository:
    """Writes audit records; keys are unique so every write creates a new document."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._users = client.collection(COLLECTION_USERS)
        self._account_audit = client.collection(COLLECTION_AUDIT)

    async def append(self, user_id: str, key: str, entry: dict[str, Any]) -> None:
        ref = self._users.document(user_id).collection(SUBCOLLECTION_AUDIT).document(key)
        await ref.set(entry)

    async def append_account_event(self, key: str, entry: dict[str, Any]) -> None:
        await self._account_audit.document(key).set(entry)

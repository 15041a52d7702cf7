"""Firestore-backed user profile repository (implements IUserProfileRepository)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from ecomind.domain.collections import COLLECTION_USERS
from ecomind.infrastructure.firebase._rest_client import (
    DocumentNotFoundError,
    FirestoreRESTClient,
    Increment,
)


class FirestoreUserProfileRepository:
    """users/{uid} documents. Counters only move through atomic increments."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._coll = client.collection(COLLECTION_USERS)

    async def get(self, user_id: str) -> dict[str, Any] | None:
        doc = await self._coll.document(user_id).get()
        if not doc:
            return None
        return doc.to_dict()

    async def create(self, user_id: str, profile: dict[str, Any]) -> None:
        await self._coll.document(user_id).set(profile)

    async def update_fields(self, user_id: str, fields: dict[str, Any]) -> None:
        """Merge fields (dotted paths allowed) into an existing profile; KeyError if missing."""
        try:
            await self._coll.document(user_id).update(fields)
        except DocumentNotFoundError as e:
            raise KeyError(user_id) from e

    async def increment_stats(
        self,
        user_id: str,
        relationships_change: int | None,
        interactions_change: int | None,
        last_active_at: datetime | None,
    ) -> None:
        fields: dict[str, Any] = {}
        if relationships_change:
            fields["stats.totalRelationships"] = Increment(relationships_change)
        if interactions_change:
            fields["stats.totalInteractions"] = Increment(interactions_change)
        if last_active_at is not None:
            fields["stats.lastActiveAt"] = last_active_at
        if not fields:
            return
        await self.update_fields(user_id, fields)

"""Firestore-backed relationship history (implements IRelationshipRepository)."""

from __future__ import annotations

from typing import Any

from ecomind.domain.collections import COLLECTION_USERS, SUBCOLLECTION_RELATIONSHIPS
from ecomind.infrastructure.firebase._rest_client import (
    CollectionReference,
    DocumentReference,
    FirestoreRESTClient,
)


class FirestoreRelationshipRepository:
    """users/{uid}/relationships/{personId} and its interactions/analysis subcollections."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._users = client.collection(COLLECTION_USERS)

    def _relationship(self, user_id: str, person_id: str) -> DocumentReference:
        return (
            self._users.document(user_id)
            .collection(SUBCOLLECTION_RELATIONSHIPS)
            .document(person_id)
        )

    def _history(self, user_id: str, person_id: str, subcollection: str) -> CollectionReference:
        return self._relationship(user_id, person_id).collection(subcollection)

    async def get_relationship(self, user_id: str, person_id: str) -> dict[str, Any] | None:
        doc = await self._relationship(user_id, person_id).get()
        if not doc:
            return None
        return {"id": doc.id, **doc.to_dict()}

    async def recent_history(
        self, user_id: str, person_id: str, subcollection: str, order_field: str, limit: int
    ) -> list[dict[str, Any]]:
        q = self._history(user_id, person_id, subcollection).order_by(order_field, "desc").limit(limit)
        return [{"id": snap.id, **snap.to_dict()} async for snap in q.stream()]

    async def append_history(
        self, user_id: str, person_id: str, subcollection: str, document: dict[str, Any]
    ) -> str:
        return await self._history(user_id, person_id, subcollection).add(document)

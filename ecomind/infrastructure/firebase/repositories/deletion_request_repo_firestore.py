"""Firestore-backed deletion requests (implements IDeletionRequestRepository)."""

from __future__ import annotations

from typing import Any

from ecomind.domain.collections import COLLECTION_DELETION_REQUESTS
from ecomind.infrastructure.firebase._rest_client import FirestoreRESTClient


class FirestoreDeletionRequestRepository:
    def __init__(self, client: FirestoreRESTClient) -> None:
        self._coll = client.collection(COLLECTION_DELETION_REQUESTS)

    async def create(self, request_id: str, document: dict[str, Any]) -> None:
        await self._coll.create(request_id, document)

    async def get(self, request_id: str) -> dict[str, Any] | None:
        doc = await self._coll.document(request_id).get()
        if not doc:
            return None
        return {"id": doc.id, **doc.to_dict()}

    async def update_status(self, request_id: str, fields: dict[str, Any]) -> None:
        await self._coll.document(request_id).update(fields)

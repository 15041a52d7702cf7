"""Firestore-backed whole-account enumeration and erasure (implements IUserDataRepository)."""

from __future__ import annotations

import logging
from typing import Any

from ecomind.application.interfaces.repositories import DocumentTarget
from ecomind.domain.collections import COLLECTION_USERS
from ecomind.infrastructure.firebase._rest_client import DocumentReference, FirestoreRESTClient

logger = logging.getLogger(__name__)


class FirestoreUserDataRepository:
    """Lists and batch-deletes the documents under users/{uid}."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._users = client.collection(COLLECTION_USERS)

    def _ref(self, user_id: str, target: DocumentTarget) -> DocumentReference:
        root = self._users.document(user_id)
        if target.subcollection is None:
            return root
        return root.collection(target.subcollection).document(target.document_id)

    async def list_documents(
        self, user_id: str, subcollection: str
    ) -> list[tuple[str, dict[str, Any]]]:
        coll = self._users.document(user_id).collection(subcollection)
        return [(snap.id, snap.to_dict()) async for snap in coll.stream()]

    async def delete_documents(
        self, user_id: str, targets: list[DocumentTarget], batch_limit: int
    ) -> int:
        """Delete targets in commits of at most batch_limit writes; return the number of commits."""
        commits = 0
        for start in range(0, len(targets), batch_limit):
            chunk = targets[start : start + batch_limit]
            batch = self._client.batch()
            for target in chunk:
                batch.delete(self._ref(user_id, target))
            await batch.commit()
            commits += 1
            logger.debug(
                "Deletion batch committed",
                extra={"user_id": user_id, "batch": commits, "writes": len(chunk)},
            )
        return commits

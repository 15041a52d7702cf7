"""Firestore-backed privacy settings repository (implements IPrivacySettingsRepository).

The document's ``updateTime`` is the version token: writes carry it as a
``currentDocument.updateTime`` precondition so a concurrent writer makes the
write fail instead of silently losing an update.
"""

from __future__ import annotations

from ecomind.application.dtos.privacy import PrivacySettings, StoredPrivacySettings
from ecomind.application.interfaces.repositories import ConcurrentModificationError
from ecomind.domain.collections import (
    COLLECTION_USERS,
    DOCUMENT_PRIVACY_SETTINGS,
    SUBCOLLECTION_SETTINGS,
)
from ecomind.infrastructure.firebase._rest_client import (
    DocumentExistsError,
    DocumentReference,
    FirestoreRESTClient,
    PreconditionFailedError,
)


class FirestorePrivacySettingsRepository:
    """users/{uid}/settings/privacy with compare-and-swap writes."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._users = client.collection(COLLECTION_USERS)

    def _ref(self, user_id: str) -> DocumentReference:
        return (
            self._users.document(user_id)
            .collection(SUBCOLLECTION_SETTINGS)
            .document(DOCUMENT_PRIVACY_SETTINGS)
        )

    async def get(self, user_id: str) -> StoredPrivacySettings | None:
        doc = await self._ref(user_id).get()
        if not doc:
            return None
        return StoredPrivacySettings(
            settings=PrivacySettings.from_document(doc.to_dict()),
            version=doc.update_time,
        )

    async def create(self, user_id: str, settings: PrivacySettings) -> str | None:
        try:
            return await self._ref(user_id).set(settings.to_document(), exists=False)
        except DocumentExistsError as e:
            raise ConcurrentModificationError(f"privacy settings already exist for {user_id}") from e

    async def replace(
        self, user_id: str, settings: PrivacySettings, version: str | None
    ) -> str | None:
        try:
            return await self._ref(user_id).set(settings.to_document(), update_time=version)
        except (PreconditionFailedError, DocumentExistsError) as e:
            raise ConcurrentModificationError(f"privacy settings changed for {user_id}") from e

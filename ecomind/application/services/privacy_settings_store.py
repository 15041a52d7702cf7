"""Consent store accessor: reads and writes the per-user PrivacySettings record."""

from __future__ import annotations

import logging

from ecomind.application.dtos.privacy import PrivacySettings, StoredPrivacySettings
from ecomind.application.interfaces.repositories import (
    ConcurrentModificationError,
    IPrivacySettingsRepository,
)
from ecomind.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class PrivacySettingsStore:
    """Lazy-creating accessor bound to the current consent version."""

    def __init__(self, repo: IPrivacySettingsRepository, consent_version: str) -> None:
        self._repo = repo
        self._consent_version = consent_version

    @property
    def consent_version(self) -> str:
        return self._consent_version

    def is_current(self, settings: PrivacySettings) -> bool:
        """True when the stored consent was given for the current consent version."""
        return settings.consent_version == self._consent_version

    async def find(self, user_id: str) -> StoredPrivacySettings | None:
        """Return stored settings without creating anything."""
        return await self._repo.get(user_id)

    async def get_or_create(self, user_id: str) -> tuple[StoredPrivacySettings, bool]:
        """Return (settings, created). Absent settings are written with conservative defaults."""
        stored = await self._repo.get(user_id)
        if stored is not None:
            return stored, False
        defaults = PrivacySettings.defaults(self._consent_version, utc_now())
        try:
            version = await self._repo.create(user_id, defaults)
        except ConcurrentModificationError:
            # Another request created it between our read and write.
            stored = await self._repo.get(user_id)
            if stored is None:
                raise
            return stored, False
        logger.info("Default privacy settings created", extra={"user_id": user_id})
        return StoredPrivacySettings(defaults, version), True

    async def save(
        self, user_id: str, settings: PrivacySettings, expected_version: str | None
    ) -> str | None:
        """Compare-and-swap write; raises ConcurrentModificationError if the record moved."""
        return await self._repo.replace(user_id, settings, expected_version)

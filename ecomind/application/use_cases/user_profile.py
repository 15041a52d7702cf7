"""User profile use cases: creation at sign-up, reads, client updates and stats."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from ecomind.application.dtos.user import (
    DISPLAY_NAME_MAX_LENGTH,
    PROFILE_MUTABLE_FIELDS,
    AuthenticatedUser,
    AuthUserRecord,
    default_profile,
)
from ecomind.application.interfaces.repositories import IUserProfileRepository
from ecomind.application.services.privacy_settings_store import PrivacySettingsStore
from ecomind.application.use_cases._guards import require_owner, to_jsonable
from ecomind.domain.enums import Theme
from ecomind.domain.exceptions import (
    EcoMindException,
    InternalException,
    InvalidArgumentException,
    NotFoundException,
)
from ecomind.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


def _sanitize_updates(updates: dict[str, Any], current: dict[str, Any]) -> dict[str, Any]:
    """Keep allow-listed fields, merge preferences over the stored ones and clamp displayName."""
    sanitized = {k: updates[k] for k in PROFILE_MUTABLE_FIELDS if k in updates}

    if "displayName" in sanitized:
        name = sanitized["displayName"]
        if name is not None and not isinstance(name, str):
            raise InvalidArgumentException("displayName must be a string", field="displayName")
        sanitized["displayName"] = name.strip()[:DISPLAY_NAME_MAX_LENGTH] if name else name

    if "photoURL" in sanitized and sanitized["photoURL"] is not None and not isinstance(sanitized["photoURL"], str):
        raise InvalidArgumentException("photoURL must be a string", field="photoURL")

    if "preferences" in sanitized:
        prefs = sanitized["preferences"]
        if not isinstance(prefs, dict):
            raise InvalidArgumentException("preferences must be an object", field="preferences")
        merged = {**(current.get("preferences") or {}), **prefs}
        if "theme" in merged and merged["theme"] not in Theme.values():
            merged["theme"] = Theme.AUTO.value
        sanitized["preferences"] = merged

    return sanitized


class UserProfileService:
    """Profiles under users/{uid}."""

    def __init__(self, profile_repo: IUserProfileRepository, store: PrivacySettingsStore) -> None:
        self._profile_repo = profile_repo
        self._store = store

    async def create_profile(self, user: AuthUserRecord) -> bool:
        """Write the default profile and privacy settings for a new account.

        Never raises: a failure here must not fail sign-up. Returns False when
        the profile could not be written (the app tolerates a missing profile).
        """
        try:
            await self._profile_repo.create(user.uid, default_profile(user, utc_now()))
            await self._store.get_or_create(user.uid)
        except Exception:
            logger.exception("Failed to create user profile", extra={"user_id": user.uid})
            return False
        logger.info("User profile created", extra={"user_id": user.uid})
        return True

    async def get_profile(self, actor: AuthenticatedUser | None, user_id: str) -> dict[str, Any]:
        """Return the caller's profile and mark them active."""
        require_owner(actor, user_id, "User can only access their own profile")
        try:
            profile = await self._profile_repo.get(user_id)
            if profile is None:
                raise NotFoundException("profile", user_id, "User profile not found")
            await self._profile_repo.update_fields(user_id, {"stats.lastActiveAt": utc_now()})
        except EcoMindException:
            raise
        except KeyError as e:
            raise NotFoundException("profile", user_id, "User profile not found") from e
        except Exception as e:
            logger.exception("Get profile failed", extra={"user_id": user_id})
            raise InternalException("Failed to get profile", operation="get_profile") from e
        return {"profile": to_jsonable(profile), "retrievedAt": utc_now().isoformat()}

    async def update_profile(
        self, actor: AuthenticatedUser | None, user_id: str, updates: dict[str, Any]
    ) -> dict[str, Any]:
        """Apply allow-listed updates and return the stored profile as re-read afterwards."""
        require_owner(actor, user_id, "User can only update their own profile")
        if not updates or not isinstance(updates, dict):
            raise InvalidArgumentException("No updates provided", field="updates")
        try:
            current = await self._profile_repo.get(user_id)
            if current is None:
                raise NotFoundException("profile", user_id, "User profile not found")
            sanitized = _sanitize_updates(updates, current)
            now = utc_now()
            await self._profile_repo.update_fields(
                user_id,
                {**sanitized, "lastUpdatedAt": now, "stats.lastActiveAt": now},
            )
            updated = await self._profile_repo.get(user_id)
        except EcoMindException:
            raise
        except KeyError as e:
            raise NotFoundException("profile", user_id, "User profile not found") from e
        except Exception as e:
            logger.exception("Profile update failed", extra={"user_id": user_id})
            raise InternalException("Failed to update profile", operation="update_profile") from e
        logger.info(
            "Profile updated",
            extra={"user_id": user_id, "updated_fields": sorted(sanitized)},
        )
        return {
            "success": True,
            "profile": to_jsonable(updated or {}),
            "updatedAt": now.isoformat(),
        }

    async def update_stats(
        self,
        actor: AuthenticatedUser | None,
        user_id: str,
        relationships_change: int | None = None,
        interactions_change: int | None = None,
        last_active_at: datetime | None = None,
    ) -> dict[str, Any]:
        """Atomically adjust the activity counters."""
        require_owner(actor, user_id)
        for name, value in (
            ("relationshipsChange", relationships_change),
            ("interactionsChange", interactions_change),
        ):
            if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                raise InvalidArgumentException(f"{name} must be an integer", field=name)
        try:
            await self._profile_repo.increment_stats(
                user_id, relationships_change, interactions_change, last_active_at
            )
        except KeyError as e:
            raise NotFoundException("profile", user_id, "User profile not found") from e
        except Exception as e:
            logger.exception("Stats update failed", extra={"user_id": user_id})
            raise InternalException("Failed to update stats", operation="update_stats") from e
        return {"success": True, "updatedAt": utc_now().isoformat()}

"""DTOs for identities and user profiles."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ecomind.domain.enums import SubscriptionTier, Theme

FREE_TIER_FEATURES: tuple[str, ...] = (
    "basic_relationships",
    "manual_interactions",
    "basic_reminders",
)

# Fields a client may change through update_profile.
PROFILE_MUTABLE_FIELDS: tuple[str, ...] = ("displayName", "photoURL", "preferences")

DISPLAY_NAME_MAX_LENGTH = 100


@dataclass(frozen=True)
class AuthenticatedUser:
    """Caller identity from a verified Firebase ID token."""

    uid: str
    email: str | None = None
    claims: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AuthUserRecord:
    """Account as reported by the identity provider's create/delete events."""

    uid: str
    email: str | None = None
    display_name: str | None = None
    photo_url: str | None = None


def default_profile(user: AuthUserRecord, now: datetime) -> dict[str, Any]:
    """Return the profile document written at account creation."""
    return {
        "uid": user.uid,
        "email": user.email,
        "displayName": user.display_name,
        "photoURL": user.photo_url,
        "createdAt": now,
        "preferences": {
            "theme": Theme.AUTO.value,
            "notifications": {
                "prompts": True,
                "reminders": True,
                "insights": False,
            },
            "privacy": {
                "dataCollection": True,
                "aiProcessing": False,
                "analytics": False,
            },
        },
        "subscription": {
            "tier": SubscriptionTier.FREE.value,
            "features": list(FREE_TIER_FEATURES),
        },
        "stats": {
            "totalRelationships": 0,
            "totalInteractions": 0,
            "lastActiveAt": now,
        },
    }

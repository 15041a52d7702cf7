"""User profile API schemas."""

from datetime import datetime
from typing import Any

from pydantic import Field, StrictInt

from ecomind.schemas.common import CamelModel


class ProfileResponse(CamelModel):
    profile: dict[str, Any]
    retrieved_at: datetime


class ProfileUpdateRequest(CamelModel):
    """Only displayName, photoURL and preferences are applied; other keys are dropped."""

    updates: dict[str, Any] = Field(default_factory=dict)


class ProfileUpdateResponse(CamelModel):
    success: bool
    profile: dict[str, Any]
    updated_at: datetime


class StatsUpdateRequest(CamelModel):
    relationships_change: StrictInt | None = None
    interactions_change: StrictInt | None = None
    last_active_at: datetime | None = None


class StatsUpdateResponse(CamelModel):
    success: bool
    updated_at: datetime

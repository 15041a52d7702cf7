"""Schemas for identity-provider hooks and the deletion worker."""

from typing import Any

from pydantic import Field

from ecomind.application.dtos.user import AuthUserRecord
from ecomind.schemas.common import CamelModel


class AuthUserEvent(CamelModel):
    """Account payload sent by the identity provider on create/delete."""

    uid: str = Field(..., min_length=1)
    email: str | None = None
    display_name: str | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")

    def to_record(self) -> AuthUserRecord:
        return AuthUserRecord(
            uid=self.uid,
            email=self.email,
            display_name=self.display_name,
            photo_url=self.photo_url,
        )


class UserCreatedResponse(CamelModel):
    uid: str
    profile_created: bool


class UserDeletedResponse(CamelModel):
    uid: str
    success: bool
    record_counts: dict[str, int] = Field(default_factory=dict)
    error: str | None = None


class DeletionProcessResponse(CamelModel):
    success: bool
    deletion_id: str
    status: str
    record_counts: dict[str, Any] = Field(default_factory=dict)

"""Privacy API schemas (consent settings, deletion requests, data export)."""

from datetime import datetime
from typing import Any, Literal

from pydantic import ConfigDict, Field, StrictBool

from ecomind.schemas.common import CamelModel


class PrivacySettingsBody(CamelModel):
    """Consent record as returned to the client."""

    data_collection: bool
    ai_processing: bool
    analytics: bool
    crash_reporting: bool
    marketing: bool
    last_updated: datetime
    consent_version: str


class PrivacySettingsUpdateRequest(CamelModel):
    """Partial update. Unknown keys, lastUpdated and consentVersion are ignored."""

    model_config = ConfigDict(extra="ignore")

    data_collection: StrictBool | None = None
    ai_processing: StrictBool | None = None
    analytics: StrictBool | None = None
    crash_reporting: StrictBool | None = None
    marketing: StrictBool | None = None

    def to_partial(self) -> dict[str, Any]:
        """Supplied flags only, keyed as stored (camelCase); explicit nulls are dropped."""
        return {
            k: v
            for k, v in self.model_dump(by_alias=True, exclude_unset=True).items()
            if v is not None
        }


class PrivacySettingsResponse(CamelModel):
    settings: PrivacySettingsBody
    is_default: bool
    consent_current: bool


class PrivacySettingsUpdateResponse(CamelModel):
    success: bool
    settings: PrivacySettingsBody
    updated_at: datetime


class DataDeletionRequest(CamelModel):
    reason: str | None = Field(default=None, max_length=1000)


class DataDeletionResponse(CamelModel):
    success: bool
    deletion_id: str
    message: str
    requested_at: datetime


class DataExportRequest(CamelModel):
    format: Literal["json", "csv"] = "json"


class DataExportResponse(CamelModel):
    """Export payload: profile, relationships, prompts, settings (plus csv sections for csv)."""

    success: bool
    data: dict[str, Any]
    exported_at: datetime

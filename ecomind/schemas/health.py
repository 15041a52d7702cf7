"""Health check schemas."""

from ecomind.schemas.common import CamelModel


class HealthResponse(CamelModel):
    status: str
    version: str


class ConfigHealthResponse(CamelModel):
    ai_enabled: bool
    firestore_enabled: bool
    environment: str
    version: str
    consent_version: str

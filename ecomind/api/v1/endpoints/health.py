"""Health check endpoints. No data-store dependencies; used for liveness probes."""

from fastapi import APIRouter

from ecomind.api.v1.dependencies import SettingsDep
from ecomind.schemas.health import ConfigHealthResponse, HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check(settings: SettingsDep) -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(status="ok", version=settings.app_version)


@router.get("/config", response_model=ConfigHealthResponse)
def config_check(settings: SettingsDep) -> ConfigHealthResponse:
    """Report which external services are configured (never their credentials)."""
    return ConfigHealthResponse(
        ai_enabled=settings.ai_enabled,
        firestore_enabled=settings.firestore_enabled,
        environment=settings.environment,
        version=settings.app_version,
        consent_version=settings.consent_version,
    )

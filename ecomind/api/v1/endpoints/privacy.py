"""Privacy API: consent settings and GDPR rights. Thin routes delegating to PrivacyService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from ecomind.api.v1.dependencies import (
    CurrentUserDep,
    get_privacy_service,
    get_request_meta,
    require_authenticated,
)
from ecomind.application.use_cases import PrivacyService
from ecomind.core.limiter import limit_writes
from ecomind.schemas.privacy import (
    DataDeletionRequest,
    DataDeletionResponse,
    DataExportRequest,
    DataExportResponse,
    PrivacySettingsResponse,
    PrivacySettingsUpdateRequest,
    PrivacySettingsUpdateResponse,
)
from ecomind.shared.request_audit import RequestMetadata

router = APIRouter(dependencies=[Depends(require_authenticated)])


@router.get("/{user_id}/privacy-settings", response_model=PrivacySettingsResponse)
async def get_privacy_settings(
    user_id: str,
    current_user: CurrentUserDep,
    privacy_svc: Annotated[PrivacyService, Depends(get_privacy_service)],
):
    """Return the caller's consent settings (defaults are created on first read)."""
    return await privacy_svc.get_privacy_settings(current_user, user_id)


@router.patch("/{user_id}/privacy-settings", response_model=PrivacySettingsUpdateResponse)
@limit_writes
async def update_privacy_settings(
    request: Request,
    user_id: str,
    body: PrivacySettingsUpdateRequest,
    current_user: CurrentUserDep,
    privacy_svc: Annotated[PrivacyService, Depends(get_privacy_service)],
    meta: Annotated[RequestMetadata, Depends(get_request_meta)],
):
    """Merge consent flags; the stored consent version becomes the current one."""
    return await privacy_svc.update_privacy_settings(
        current_user, user_id, body.to_partial(), meta
    )


@router.post(
    "/{user_id}/data-deletion-requests",
    response_model=DataDeletionResponse,
    status_code=202,
)
@limit_writes
async def request_data_deletion(
    request: Request,
    user_id: str,
    current_user: CurrentUserDep,
    privacy_svc: Annotated[PrivacyService, Depends(get_privacy_service)],
    meta: Annotated[RequestMetadata, Depends(get_request_meta)],
    body: DataDeletionRequest | None = None,
):
    """Record a GDPR erasure request (processed asynchronously)."""
    return await privacy_svc.request_data_deletion(
        current_user, user_id, body.reason if body else None, meta
    )


@router.post("/{user_id}/data-export", response_model=DataExportResponse)
@limit_writes
async def export_user_data(
    request: Request,
    user_id: str,
    current_user: CurrentUserDep,
    privacy_svc: Annotated[PrivacyService, Depends(get_privacy_service)],
    meta: Annotated[RequestMetadata, Depends(get_request_meta)],
    body: DataExportRequest | None = None,
):
    """Export the caller's profile, relationships, prompts and settings (json or csv)."""
    return await privacy_svc.export_user_data(
        current_user, user_id, body.format if body else "json", meta
    )

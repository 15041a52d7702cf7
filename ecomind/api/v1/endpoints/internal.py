"""Internal API: identity-provider account hooks and the deletion worker.

Every route requires the X-Internal-Secret header; none is reachable by
mobile clients.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from ecomind.api.v1.dependencies import (
    get_account_erasure_service,
    get_user_profile_service,
    require_internal_secret,
)
from ecomind.application.use_cases import AccountErasureService, UserProfileService
from ecomind.schemas.internal import (
    AuthUserEvent,
    DeletionProcessResponse,
    UserCreatedResponse,
    UserDeletedResponse,
)

router = APIRouter(dependencies=[Depends(require_internal_secret)])


@router.post("/auth-events/user-created", response_model=UserCreatedResponse)
async def on_user_created(
    body: AuthUserEvent,
    profile_svc: Annotated[UserProfileService, Depends(get_user_profile_service)],
):
    """Create the default profile and privacy settings. Always 200 so sign-up never fails."""
    created = await profile_svc.create_profile(body.to_record())
    return UserCreatedResponse(uid=body.uid, profile_created=created)


@router.post("/auth-events/user-deleted", response_model=UserDeletedResponse)
async def on_user_deleted(
    body: AuthUserEvent,
    erasure_svc: Annotated[AccountErasureService, Depends(get_account_erasure_service)],
):
    """Erase the account's data subtree. Failures are recorded for manual cleanup."""
    result = await erasure_svc.erase_account(body.uid, body.email)
    return UserDeletedResponse(
        uid=body.uid,
        success=result["success"],
        record_counts=result.get("recordCounts", {}),
        error=result.get("error"),
    )


@router.post("/deletion-requests/{request_id}/process", response_model=DeletionProcessResponse)
async def process_deletion_request(
    request_id: str,
    erasure_svc: Annotated[AccountErasureService, Depends(get_account_erasure_service)],
):
    return await erasure_svc.process_deletion_request(request_id)

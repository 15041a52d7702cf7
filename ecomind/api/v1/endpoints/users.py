"""User profile API: thin routes delegating to UserProfileService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from ecomind.api.v1.dependencies import (
    CurrentUserDep,
    get_user_profile_service,
    require_authenticated,
)
from ecomind.application.use_cases import UserProfileService
from ecomind.core.limiter import limit_writes
from ecomind.schemas.user import (
    ProfileResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    StatsUpdateRequest,
    StatsUpdateResponse,
)

router = APIRouter(dependencies=[Depends(require_authenticated)])


@router.get("/{user_id}/profile", response_model=ProfileResponse)
async def get_profile(
    user_id: str,
    current_user: CurrentUserDep,
    profile_svc: Annotated[UserProfileService, Depends(get_user_profile_service)],
):
    return await profile_svc.get_profile(current_user, user_id)


@router.patch("/{user_id}/profile", response_model=ProfileUpdateResponse)
@limit_writes
async def update_profile(
    request: Request,
    user_id: str,
    body: ProfileUpdateRequest,
    current_user: CurrentUserDep,
    profile_svc: Annotated[UserProfileService, Depends(get_user_profile_service)],
):
    """Update displayName, photoURL and/or preferences."""
    return await profile_svc.update_profile(current_user, user_id, body.updates)


@router.post("/{user_id}/stats", response_model=StatsUpdateResponse)
@limit_writes
async def update_stats(
    request: Request,
    user_id: str,
    body: StatsUpdateRequest,
    current_user: CurrentUserDep,
    profile_svc: Annotated[UserProfileService, Depends(get_user_profile_service)],
):
    """Atomically adjust relationship/interaction counters."""
    return await profile_svc.update_stats(
        current_user,
        user_id,
        relationships_change=body.relationships_change,
        interactions_change=body.interactions_change,
        last_active_at=body.last_active_at,
    )

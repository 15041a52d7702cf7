"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from ecomind.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from ecomind.api.v1.endpoints import ai, health, internal, privacy, users
from ecomind.schemas.common import ErrorResponse

# Every failure body has the same shape (see core.exception_handlers).
_ERROR_RESPONSES = {
    status: {"model": ErrorResponse} for status in (400, 401, 403, 404, 409, 500)
}

api_router = APIRouter(responses=_ERROR_RESPONSES)

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(privacy.router, prefix="/users", tags=["privacy"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(ai.router, prefix="/ai", tags=["ai"])
api_router.include_router(internal.router, prefix="/internal", tags=["internal"])

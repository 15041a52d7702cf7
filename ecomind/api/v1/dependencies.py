"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the external clients built by the lifespan
(app.state), the Firestore repositories and the application use cases.
Routes depend only on these providers; tests replace them through
app.dependency_overrides.
"""

from __future__ import annotations

import hmac
import logging
from typing import Annotated

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ecomind.application.dtos.user import AuthenticatedUser
from ecomind.application.interfaces.repositories import (
    IAuditLogRepository,
    IDeletionRequestRepository,
    IPrivacySettingsRepository,
    IRelationshipRepository,
    IUserDataRepository,
    IUserProfileRepository,
)
from ecomind.application.interfaces.services import (
    IEmbeddingModel,
    IIdentityVerifier,
    ITextGenerator,
)
from ecomind.application.services.audit_logger import AuditLogger
from ecomind.application.services.consent_gate import ConsentGate
from ecomind.application.services.privacy_settings_store import PrivacySettingsStore
from ecomind.application.use_cases import (
    AccountErasureService,
    ContextAnalysisService,
    EmbeddingService,
    PrivacyService,
    UserProfileService,
)
from ecomind.core.config import Settings, get_settings
from ecomind.domain.exceptions import (
    FailedPreconditionException,
    PermissionDeniedException,
    UnauthenticatedException,
)
from ecomind.infrastructure.firebase._rest_client import FirestoreRESTClient
from ecomind.infrastructure.firebase.repositories import (
    FirestoreAuditLogRepository,
    FirestoreDeletionRequestRepository,
    FirestorePrivacySettingsRepository,
    FirestoreRelationshipRepository,
    FirestoreUserDataRepository,
    FirestoreUserProfileRepository,
)
from ecomind.shared.request_audit import RequestMetadata, get_request_metadata

logger = logging.getLogger(__name__)

SettingsDep = Annotated[Settings, Depends(get_settings)]


# ---- Clients built at startup ----


def get_firestore(request: Request) -> FirestoreRESTClient:
    """Firestore client from app.state; failed-precondition when not configured."""
    client = getattr(request.app.state, "firestore", None)
    if client is None:
        raise FailedPreconditionException("Data store is not configured")
    return client


def get_text_generator(request: Request) -> ITextGenerator | None:
    """Gemini text model, or None when GEMINI_API_KEY is unset."""
    return getattr(request.app.state, "text_generator", None)


def get_embedding_model(request: Request) -> IEmbeddingModel | None:
    return getattr(request.app.state, "embedding_model", None)


def get_token_verifier(request: Request) -> IIdentityVerifier | None:
    return getattr(request.app.state, "token_verifier", None)


FirestoreDep = Annotated[FirestoreRESTClient, Depends(get_firestore)]


# ---- Repositories ----


def get_privacy_settings_repo(client: FirestoreDep) -> IPrivacySettingsRepository:
    return FirestorePrivacySettingsRepository(client)


def get_audit_repo(client: FirestoreDep) -> IAuditLogRepository:
    return FirestoreAuditLogRepository(client)


def get_user_profile_repo(client: FirestoreDep) -> IUserProfileRepository:
    return FirestoreUserProfileRepository(client)


def get_relationship_repo(client: FirestoreDep) -> IRelationshipRepository:
    return FirestoreRelationshipRepository(client)


def get_user_data_repo(client: FirestoreDep) -> IUserDataRepository:
    return FirestoreUserDataRepository(client)


def get_deletion_request_repo(client: FirestoreDep) -> IDeletionRequestRepository:
    return FirestoreDeletionRequestRepository(client)


# ---- Application services ----


def get_audit_logger(
    audit_repo: Annotated[IAuditLogRepository, Depends(get_audit_repo)],
) -> AuditLogger:
    return AuditLogger(audit_repo)


def get_privacy_store(
    repo: Annotated[IPrivacySettingsRepository, Depends(get_privacy_settings_repo)],
    settings: SettingsDep,
) -> PrivacySettingsStore:
    """Consent store bound to the configured CONSENT_VERSION."""
    return PrivacySettingsStore(repo, settings.consent_version)


def get_consent_gate(
    store: Annotated[PrivacySettingsStore, Depends(get_privacy_store)],
    audit: Annotated[AuditLogger, Depends(get_audit_logger)],
) -> ConsentGate:
    return ConsentGate(store, audit)


# ---- Use cases ----


def get_privacy_service(
    store: Annotated[PrivacySettingsStore, Depends(get_privacy_store)],
    audit: Annotated[AuditLogger, Depends(get_audit_logger)],
    profile_repo: Annotated[IUserProfileRepository, Depends(get_user_profile_repo)],
    user_data_repo: Annotated[IUserDataRepository, Depends(get_user_data_repo)],
    deletion_repo: Annotated[IDeletionRequestRepository, Depends(get_deletion_request_repo)],
) -> PrivacyService:
    return PrivacyService(store, audit, profile_repo, user_data_repo, deletion_repo)


def get_user_profile_service(
    profile_repo: Annotated[IUserProfileRepository, Depends(get_user_profile_repo)],
    store: Annotated[PrivacySettingsStore, Depends(get_privacy_store)],
) -> UserProfileService:
    return UserProfileService(profile_repo, store)


def get_account_erasure_service(
    user_data_repo: Annotated[IUserDataRepository, Depends(get_user_data_repo)],
    deletion_repo: Annotated[IDeletionRequestRepository, Depends(get_deletion_request_repo)],
    audit: Annotated[AuditLogger, Depends(get_audit_logger)],
    settings: SettingsDep,
) -> AccountErasureService:
    return AccountErasureService(
        user_data_repo, deletion_repo, audit, batch_limit=settings.firestore_batch_limit
    )


def get_context_analysis_service(
    gate: Annotated[ConsentGate, Depends(get_consent_gate)],
    generator: Annotated[ITextGenerator | None, Depends(get_text_generator)],
    relationship_repo: Annotated[IRelationshipRepository, Depends(get_relationship_repo)],
) -> ContextAnalysisService:
    return ContextAnalysisService(gate, generator, relationship_repo)


def get_embedding_service(
    gate: Annotated[ConsentGate, Depends(get_consent_gate)],
    model: Annotated[IEmbeddingModel | None, Depends(get_embedding_model)],
    settings: SettingsDep,
) -> EmbeddingService:
    return EmbeddingService(
        gate,
        model,
        dimensions=settings.embedding_dimensions,
        max_content_length=settings.embedding_max_content_length,
        max_batch_items=settings.batch_embedding_max_items,
        chunk_size=settings.batch_embedding_chunk_size,
        batch_timeout_seconds=settings.batch_embedding_timeout_seconds,
    )


# ---- Request context ----


def get_request_meta(request: Request, settings: SettingsDep) -> RequestMetadata:
    """Request id, client IP and user agent for audit records."""
    return get_request_metadata(request, settings.request_id_header)


# ---- Auth (caller from Firebase ID token) ----

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_user_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    verifier: Annotated[IIdentityVerifier | None, Depends(get_token_verifier)],
) -> AuthenticatedUser | None:
    """Return the verified caller, or None.

    Use cases raise unauthenticated for None, so authentication is checked
    before identity and input in every operation.
    """
    if not credentials:
        return None
    if verifier is None:
        logger.warning("Bearer token received but token verification is not configured")
        return None
    try:
        return await verifier.verify(credentials.credentials)
    except ValueError as e:
        logger.info("Rejected ID token: %s", e)
        return None


CurrentUserDep = Annotated[AuthenticatedUser | None, Depends(get_current_user_optional)]


def require_internal_secret(
    settings: SettingsDep,
    x_internal_secret: Annotated[str | None, Header()] = None,
) -> None:
    """Guard for identity-provider hooks and the deletion worker (X-Internal-Secret)."""
    configured = settings.internal_api_secret.get_secret_value() if settings.internal_api_secret else ""
    if not configured:
        raise PermissionDeniedException("Internal endpoints are disabled", reason="internal_disabled")
    if not x_internal_secret or not hmac.compare_digest(
        x_internal_secret.encode(), configured.encode()
    ):
        raise PermissionDeniedException("Invalid internal secret", reason="invalid_internal_secret")


def require_authenticated(current_user: CurrentUserDep) -> AuthenticatedUser:
    """Route guard resolved ahead of the data store, so anonymous callers get 401 first."""
    if current_user is None:
        raise UnauthenticatedException()
    return current_user

"""Ports: repository and service Protocols implemented by infrastructure."""

from ecomind.application.interfaces.repositories import (
    ConcurrentModificationError,
    DocumentTarget,
    IAuditLogRepository,
    IDeletionRequestRepository,
    IPrivacySettingsRepository,
    IRelationshipRepository,
    IUserDataRepository,
    IUserProfileRepository,
)
from ecomind.application.interfaces.services import (
    AIProviderError,
    GenerationParams,
    IEmbeddingModel,
    IIdentityVerifier,
    ITextGenerator,
)

__all__ = [
    "ConcurrentModificationError",
    "DocumentTarget",
    "IAuditLogRepository",
    "IDeletionRequestRepository",
    "IPrivacySettingsRepository",
    "IRelationshipRepository",
    "IUserDataRepository",
    "IUserProfileRepository",
    "AIProviderError",
    "GenerationParams",
    "IEmbeddingModel",
    "IIdentityVerifier",
    "ITextGenerator",
]

"""Application DTOs (plain dataclasses, no persistence or framework types)."""

from ecomind.application.dtos.ai import (
    BatchEmbeddingResult,
    EmbeddingResult,
    ExtractedContext,
    InsightsResult,
    InteractionInput,
    RelationshipBundle,
    SentimentAnalysisResult,
    SentimentScore,
)
from ecomind.application.dtos.privacy import (
    PRIVACY_FLAGS,
    DeletionRequest,
    PrivacySettings,
    StoredPrivacySettings,
)
from ecomind.application.dtos.user import (
    AuthenticatedUser,
    AuthUserRecord,
    default_profile,
)

__all__ = [
    "BatchEmbeddingResult",
    "EmbeddingResult",
    "ExtractedContext",
    "InsightsResult",
    "InteractionInput",
    "RelationshipBundle",
    "SentimentAnalysisResult",
    "SentimentScore",
    "PRIVACY_FLAGS",
    "DeletionRequest",
    "PrivacySettings",
    "StoredPrivacySettings",
    "AuthenticatedUser",
    "AuthUserRecord",
    "default_profile",
]

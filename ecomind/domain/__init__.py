"""Domain layer: error taxonomy and fixed vocabularies. No I/O, no framework imports."""

from ecomind.domain.enums import (
    AIOperation,
    AnalysisType,
    DeletionRequestStatus,
    EmbeddingContentType,
    EmotionalTone,
    EngagementLevel,
    ExportFormat,
    SentimentTrend,
    SubscriptionTier,
    Theme,
)
from ecomind.domain.exceptions import (
    AbortedException,
    EcoMindException,
    FailedPreconditionException,
    InternalException,
    InvalidArgumentException,
    NotFoundException,
    PermissionDeniedException,
    UnauthenticatedException,
)

__all__ = [
    "AIOperation",
    "AnalysisType",
    "DeletionRequestStatus",
    "EmbeddingContentType",
    "EmotionalTone",
    "EngagementLevel",
    "ExportFormat",
    "SentimentTrend",
    "SubscriptionTier",
    "Theme",
    "AbortedException",
    "EcoMindException",
    "FailedPreconditionException",
    "InternalException",
    "InvalidArgumentException",
    "NotFoundException",
    "PermissionDeniedException",
    "UnauthenticatedException",
]

"""Use cases: one service per area of the public interface."""

from ecomind.application.use_cases.account_erasure import AccountErasureService
from ecomind.application.use_cases.context_analysis import ContextAnalysisService
from ecomind.application.use_cases.embeddings import (
    EmbeddingService,
    check_embedding_service_health,
)
from ecomind.application.use_cases.privacy import PrivacyService
from ecomind.application.use_cases.user_profile import UserProfileService

__all__ = [
    "AccountErasureService",
    "ContextAnalysisService",
    "EmbeddingService",
    "PrivacyService",
    "UserProfileService",
    "check_embedding_service_health",
]

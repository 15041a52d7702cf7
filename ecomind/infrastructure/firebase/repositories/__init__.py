"""Firestore-backed implementations of the application repository ports."""

from ecomind.infrastructure.firebase.repositories.audit_repo_firestore import (
    FirestoreAuditLogRepository,
)
from ecomind.infrastructure.firebase.repositories.deletion_request_repo_firestore import (
    FirestoreDeletionRequestRepository,
)
from ecomind.infrastructure.firebase.repositories.privacy_settings_repo_firestore import (
    FirestorePrivacySettingsRepository,
)
from ecomind.infrastructure.firebase.repositories.relationship_repo_firestore import (
    FirestoreRelationshipRepository,
)
from ecomind.infrastructure.firebase.repositories.user_data_repo_firestore import (
    FirestoreUserDataRepository,
)
from ecomind.infrastructure.firebase.repositories.user_profile_repo_firestore import (
    FirestoreUserProfileRepository,
)

__all__ = [
    "FirestoreAuditLogRepository",
    "FirestoreDeletionRequestRepository",
    "FirestorePrivacySettingsRepository",
    "FirestoreRelationshipRepository",
    "FirestoreUserDataRepository",
    "FirestoreUserProfileRepository",
]

"""Firestore collection and document names (schema-in-code).

Firestore has no DDL or migrations. Collections are created automatically
when you first write a document. Everything user-owned lives under
``users/{uid}/...``; these constants are the single source of truth for
those paths.
"""

COLLECTION_USERS = "users"

# Per-user subcollections (users/{uid}/<name>)
SUBCOLLECTION_RELATIONSHIPS = "relationships"
SUBCOLLECTION_PROMPTS = "prompts"
SUBCOLLECTION_SETTINGS = "settings"
SUBCOLLECTION_INSIGHTS = "insights"
SUBCOLLECTION_CONTEXT_EXTRACTIONS = "contextExtractions"
SUBCOLLECTION_SENTIMENT_ANALYSES = "sentimentAnalyses"
SUBCOLLECTION_AUDIT = "_audit"

# Per-relationship subcollections (users/{uid}/relationships/{personId}/<name>)
SUBCOLLECTION_INTERACTIONS = "interactions"

# settings/{doc}
DOCUMENT_PRIVACY_SETTINGS = "privacy"

# Top-level compliance collections
COLLECTION_AUDIT = "_audit"
COLLECTION_DELETION_REQUESTS = "_deletion_requests"

# Subcollections removed when an account is erased (root profile is deleted too).
ERASABLE_USER_SUBCOLLECTIONS: tuple[str, ...] = (
    SUBCOLLECTION_RELATIONSHIPS,
    SUBCOLLECTION_PROMPTS,
    SUBCOLLECTION_SETTINGS,
    SUBCOLLECTION_INSIGHTS,
    SUBCOLLECTION_CONTEXT_EXTRACTIONS,
    SUBCOLLECTION_SENTIMENT_ANALYSES,
)

"""Domain enumerations (fixed vocabularies stored in documents and returned by AI operations)."""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class EmotionalTone(_ValuesMixin, str, Enum):
    """Tone vocabulary for extracted context and sentiment."""

    VERY_POSITIVE = "very_positive"
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"
    VERY_NEGATIVE = "very_negative"
    MIXED = "mixed"


class SentimentTrend(_ValuesMixin, str, Enum):
    """Direction of sentiment (or relationship health) over time."""

    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class EngagementLevel(_ValuesMixin, str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AnalysisType(_ValuesMixin, str, Enum):
    """Focus of a relationship-insights run."""

    HEALTH = "health"
    COMMUNICATION = "communication"
    ENGAGEMENT = "engagement"
    COMPREHENSIVE = "comprehensive"


class Theme(_ValuesMixin, str, Enum):
    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"


class SubscriptionTier(_ValuesMixin, str, Enum):
    FREE = "free"
    PREMIUM = "premium"
    FAMILY = "family"


class EmbeddingContentType(_ValuesMixin, str, Enum):
    """Content kinds that get a semantic prefix before embedding."""

    RELATIONSHIP_CONTEXT = "relationship_context"
    EMOTIONAL_SIGNAL = "emotional_signal"
    INTERACTION_SUMMARY = "interaction_summary"
    LIFE_EVENT = "life_event"


class ExportFormat(_ValuesMixin, str, Enum):
    JSON = "json"
    CSV = "csv"


class DeletionRequestStatus(_ValuesMixin, str, Enum):
    """Lifecycle of a GDPR deletion request."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class AIOperation(_ValuesMixin, str, Enum):
    """Operation names recorded by the consent gate's audit trail."""

    CONTEXT_EXTRACTION = "context_extraction"
    SENTIMENT_ANALYSIS = "sentiment_analysis"
    INSIGHTS_GENERATION = "insights_generation"
    EMBEDDING_GENERATION = "embedding_generation"

"""DTOs for AI operations: requests and write-once results.

Results serialize to camelCase dicts (to_dict) because that is what the
mobile client reads and what is appended to the history subcollections.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class InteractionInput:
    """One interaction submitted for sentiment analysis."""

    id: str
    text: str
    timestamp: str
    type: str


@dataclass(frozen=True)
class ExtractedContext:
    summary: str
    key_points: list[str]
    emotional_tone: str
    topics: list[str]
    action_items: list[str]
    relationship_insights: list[str]
    confidence_score: float
    extracted_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "keyPoints": list(self.key_points),
            "emotionalTone": self.emotional_tone,
            "topics": list(self.topics),
            "actionItems": list(self.action_items),
            "relationshipInsights": list(self.relationship_insights),
            "confidenceScore": self.confidence_score,
            "extractedAt": self.extracted_at.isoformat() if self.extracted_at else None,
        }


@dataclass(frozen=True)
class SentimentScore:
    id: str
    sentiment: str
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "sentiment": self.sentiment, "confidence": self.confidence}


@dataclass(frozen=True)
class SentimentAnalysisResult:
    overall_sentiment: str
    sentiment_trend: str
    individual_scores: list[SentimentScore]
    insights: list[str]
    confidence: float
    analysis_date: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "overallSentiment": self.overall_sentiment,
            "sentimentTrend": self.sentiment_trend,
            "individualScores": [s.to_dict() for s in self.individual_scores],
            "insights": list(self.insights),
            "confidence": self.confidence,
            "analysisDate": self.analysis_date.isoformat() if self.analysis_date else None,
        }


@dataclass(frozen=True)
class InsightsResult:
    health_score: float
    health_trend: str
    communication_patterns: list[str]
    engagement_level: str
    strengths: list[str]
    improvements: list[str]
    recommendations: list[str]
    suggested_actions: list[str]
    risk_factors: list[str]
    opportunities: list[str]
    confidence: float
    analysis_type: str | None = None
    generated_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "healthScore": self.health_score,
            "healthTrend": self.health_trend,
            "communicationPatterns": list(self.communication_patterns),
            "engagementLevel": self.engagement_level,
            "strengths": list(self.strengths),
            "improvements": list(self.improvements),
            "recommendations": list(self.recommendations),
            "suggestedActions": list(self.suggested_actions),
            "riskFactors": list(self.risk_factors),
            "opportunities": list(self.opportunities),
            "confidence": self.confidence,
            "analysisType": self.analysis_type,
            "generatedAt": self.generated_at.isoformat() if self.generated_at else None,
        }


@dataclass(frozen=True)
class RelationshipBundle:
    """Everything the insights prompt is rendered from."""

    relationship: dict[str, Any]
    interactions: list[dict[str, Any]] = field(default_factory=list)
    contexts: list[dict[str, Any]] = field(default_factory=list)
    sentiments: list[dict[str, Any]] = field(default_factory=list)
    analysis_type: str = "comprehensive"


@dataclass(frozen=True)
class EmbeddingResult:
    embedding: list[float]
    model: str
    processing_time_ms: int
    token_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "embedding": self.embedding,
            "model": self.model,
            "processingTime": self.processing_time_ms,
            "tokenCount": self.token_count,
        }


@dataclass(frozen=True)
class BatchEmbeddingResult:
    """Per-input outcome: embeddings[i] is set or errors[i] is, never both."""

    embeddings: list[list[float] | None]
    errors: list[str | None]

    @property
    def success_count(self) -> int:
        return sum(1 for e in self.embeddings if e is not None)

    @property
    def error_count(self) -> int:
        return sum(1 for e in self.errors if e is not None)

    def to_dict(self) -> dict[str, Any]:
        return {"embeddings": self.embeddings, "errors": self.errors}

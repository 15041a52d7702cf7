"""AI operation API schemas."""

from datetime import datetime
from typing import Any

from pydantic import Field

from ecomind.application.dtos.ai import InteractionInput
from ecomind.schemas.common import CamelModel


class ContextExtractionRequest(CamelModel):
    user_id: str
    text: str
    person_id: str | None = None
    interaction_type: str | None = None
    metadata: dict[str, Any] | None = None


class ExtractedContextResponse(CamelModel):
    summary: str
    key_points: list[str]
    emotional_tone: str
    topics: list[str]
    action_items: list[str]
    relationship_insights: list[str]
    confidence_score: float
    extracted_at: datetime | None = None


class InteractionItem(CamelModel):
    id: str
    text: str
    timestamp: str = ""
    type: str = "interaction"

    def to_input(self) -> InteractionInput:
        return InteractionInput(id=self.id, text=self.text, timestamp=self.timestamp, type=self.type)


class SentimentAnalysisRequest(CamelModel):
    user_id: str
    interactions: list[InteractionItem] = Field(default_factory=list)
    person_id: str | None = None


class SentimentScoreResponse(CamelModel):
    id: str
    sentiment: str
    confidence: float


class SentimentAnalysisResponse(CamelModel):
    overall_sentiment: str
    sentiment_trend: str
    individual_scores: list[SentimentScoreResponse]
    insights: list[str]
    confidence: float
    analysis_date: datetime | None = None


class RelationshipInsightsRequest(CamelModel):
    user_id: str
    person_id: str
    analysis_type: str | None = None


class RelationshipInsightsResponse(CamelModel):
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


class EmbeddingRequest(CamelModel):
    user_id: str
    content: str
    content_type: str | None = None


class EmbeddingResponse(CamelModel):
    embedding: list[float]
    model: str
    processing_time: int
    token_count: int


class BatchEmbeddingRequest(CamelModel):
    user_id: str
    contents: list[str] = Field(default_factory=list)
    content_type: str | None = None


class BatchEmbeddingResponse(CamelModel):
    """embeddings[i] and errors[i] describe contents[i]; exactly one of them is set."""

    embeddings: list[list[float] | None]
    errors: list[str | None]


class EmbeddingHealthResponse(CamelModel):
    healthy: bool
    timestamp: datetime
    response_time: int | None = None
    model: str | None = None
    dimensions: int | None = None
    error: str | None = None

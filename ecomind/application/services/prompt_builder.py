"""Prompt templates for the AI operations.

Every builder is a pure function of its inputs: the same request renders the
same prompt. Each template names the JSON shape the model must answer with;
response_parser reads that shape back defensively.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from ecomind.application.dtos.ai import InteractionInput, RelationshipBundle
from ecomind.application.interfaces.services import GenerationParams
from ecomind.domain.enums import EmbeddingContentType

EXTRACTION_PARAMS = GenerationParams(temperature=0.3, top_k=32, top_p=0.9, max_output_tokens=1024)
SENTIMENT_PARAMS = GenerationParams(temperature=0.3, top_k=32, top_p=0.9, max_output_tokens=1024)
INSIGHTS_PARAMS = GenerationParams(temperature=0.4, top_k=32, top_p=0.9, max_output_tokens=2048)

# Items of each history kind quoted verbatim in the insights prompt.
INSIGHTS_INTERACTION_LINES = 5
INSIGHTS_CONTEXT_LINES = 3
INSIGHTS_SENTIMENT_LINES = 2

EMBEDDING_CONTENT_PREFIXES: dict[str, str] = {
    EmbeddingContentType.RELATIONSHIP_CONTEXT.value: "Relationship context",
    EmbeddingContentType.EMOTIONAL_SIGNAL.value: "Emotional context",
    EmbeddingContentType.INTERACTION_SUMMARY.value: "Interaction summary",
    EmbeddingContentType.LIFE_EVENT.value: "Life event",
}

_EXTRACTION_TEMPLATE = """
Analyze this {interaction_type} and extract meaningful context for relationship management:

TEXT TO ANALYZE:
"{text}"

METADATA:
{metadata}

EXTRACT:
1. Summary (1-2 sentences)
2. Key points (3-5 important items)
3. Emotional tone (very_positive, positive, neutral, negative, very_negative, mixed)
4. Topics discussed (3-5 main topics)
5. Action items or follow-ups
6. Relationship insights
7. Confidence score (0.0-1.0)

RESPONSE FORMAT (JSON):
{{
  "summary": "Brief summary of the interaction",
  "keyPoints": ["Point 1", "Point 2", "Point 3"],
  "emotionalTone": "positive",
  "topics": ["Topic 1", "Topic 2", "Topic 3"],
  "actionItems": ["Action 1", "Action 2"],
  "relationshipInsights": ["Insight 1", "Insight 2"],
  "confidenceScore": 0.85
}}

Focus on relationship-relevant information and maintain privacy by not including sensitive personal details:
"""

_SENTIMENT_TEMPLATE = """
Analyze the sentiment and emotional progression in these interactions:

INTERACTIONS (chronological order):
{interactions}

ANALYZE:
1. Overall sentiment across all interactions
2. Sentiment trend over time (improving, stable, declining)
3. Individual interaction scores
4. Key insights about the relationship dynamic

RESPONSE FORMAT (JSON):
{{
  "overallSentiment": "positive",
  "sentimentTrend": "stable",
  "individualScores": [
    {{"id": "interaction_id", "sentiment": "positive", "confidence": 0.8}}
  ],
  "insights": ["Insight 1", "Insight 2", "Insight 3"]
}}

Focus on relationship health indicators and communication patterns without repeating sensitive personal details:
"""

_INSIGHTS_TEMPLATE = """
Generate comprehensive relationship insights based on this data:

RELATIONSHIP INFO:
{relationship}

RECENT INTERACTIONS ({interaction_count}):
{interactions}

CONTEXT EXTRACTIONS ({context_count}):
{contexts}

SENTIMENT ANALYSES ({sentiment_count}):
{sentiments}

ANALYSIS TYPE: {analysis_type}

GENERATE INSIGHTS:
1. Relationship health assessment
2. Communication patterns
3. Engagement levels
4. Recommendations for improvement
5. Strengths to maintain
6. Areas for attention
7. Suggested actions

RESPONSE FORMAT (JSON):
{{
  "healthScore": 8.5,
  "healthTrend": "stable",
  "communicationPatterns": ["Pattern 1", "Pattern 2"],
  "engagementLevel": "high",
  "strengths": ["Strength 1", "Strength 2"],
  "improvements": ["Improvement 1", "Improvement 2"],
  "recommendations": ["Recommendation 1", "Recommendation 2"],
  "suggestedActions": ["Action 1", "Action 2"],
  "riskFactors": ["Risk 1"],
  "opportunities": ["Opportunity 1"]
}}

Provide actionable, privacy-conscious insights that do not include sensitive personal details:
"""


def _render_json(value: Any) -> str:
    return json.dumps(value, indent=2, sort_keys=True, default=str)


def build_extraction_prompt(
    text: str,
    interaction_type: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> str:
    """Render the context-extraction prompt. Metadata is pretty-printed JSON, or ``None``."""
    return _EXTRACTION_TEMPLATE.format(
        interaction_type=interaction_type or "text",
        text=text,
        metadata=_render_json(metadata) if metadata else "None",
    )


def build_sentiment_prompt(interactions: Sequence[InteractionInput]) -> str:
    lines = "\n".join(
        f'{i}. {item.timestamp} ({item.type}):\n"{item.text}"'
        for i, item in enumerate(interactions, start=1)
    )
    return _SENTIMENT_TEMPLATE.format(interactions=lines)


def build_insights_prompt(bundle: RelationshipBundle) -> str:
    """Render the insights prompt from a relationship and its most recent history."""
    interactions = "\n".join(
        f"{idx}. {item.get('type', 'interaction')}: {item.get('notes') or 'No notes'}"
        for idx, item in enumerate(bundle.interactions[:INSIGHTS_INTERACTION_LINES], start=1)
    )
    contexts = "\n".join(
        f"{idx}. {item.get('summary', '')}"
        for idx, item in enumerate(bundle.contexts[:INSIGHTS_CONTEXT_LINES], start=1)
    )
    sentiments = "\n".join(
        f"{idx}. Overall: {item.get('overallSentiment')}, Trend: {item.get('sentimentTrend')}"
        for idx, item in enumerate(bundle.sentiments[:INSIGHTS_SENTIMENT_LINES], start=1)
    )
    return _INSIGHTS_TEMPLATE.format(
        relationship=_render_json(bundle.relationship),
        interaction_count=len(bundle.interactions),
        interactions=interactions,
        context_count=len(bundle.contexts),
        contexts=contexts,
        sentiment_count=len(bundle.sentiments),
        sentiments=sentiments,
        analysis_type=bundle.analysis_type,
    )


def preprocess_embedding_content(
    content: str, content_type: str | None = None, max_length: int = 2000
) -> str:
    """Trim, add the content-type prefix (unknown types get none) and truncate to max_length."""
    processed = content.strip()
    prefix = EMBEDDING_CONTENT_PREFIXES.get(content_type or "")
    if prefix:
        processed = f"{prefix}: {processed}"
    return processed[:max_length]

"""Defensive parsing of free-text model output into typed results.

Two stages. ``extract_json_object`` finds the outermost ``{...}`` span in the
text and decodes it. The ``fill_*_defaults`` functions then default every
field individually, so a model answer missing half its keys still yields a
fully populated result. The composed ``parse_*_response`` functions are
total: any input string produces a result, falling back to fixed values when
no JSON object can be recovered.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence
from typing import Any

from ecomind.application.dtos.ai import (
    ExtractedContext,
    InsightsResult,
    InteractionInput,
    SentimentAnalysisResult,
    SentimentScore,
)
from ecomind.domain.enums import EmotionalTone, EngagementLevel, SentimentTrend

logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

PARTIAL_CONFIDENCE = 0.7
FALLBACK_CONFIDENCE = 0.5
FALLBACK_HEALTH_SCORE = 7.0
MAX_HEALTH_SCORE = 10.0

CONTEXT_FALLBACK_SUMMARY = "Context extraction completed"
CONTEXT_DEFAULT_SUMMARY = "Context extracted"


def extract_json_object(raw: str) -> dict[str, Any] | None:
    """Return the greedy ``{...}`` span of raw decoded as a JSON object, or None. Never raises."""
    if not isinstance(raw, str):
        return None
    match = _JSON_OBJECT_RE.search(raw)
    if match is None:
        return None
    try:
        parsed = json.loads(match.group(0))
    except (ValueError, RecursionError):
        return None
    return parsed if isinstance(parsed, dict) else None


# Field coercion


def _as_str(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return default


def _as_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    out: list[str] = []
    for item in value:
        if isinstance(item, str):
            out.append(item)
        elif isinstance(item, (int, float)) and not isinstance(item, bool):
            out.append(str(item))
    return out


def _as_number(value: Any, default: float, low: float, high: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    try:
        number = float(value)
    except OverflowError:
        # Integer literal beyond float range; clamp by sign.
        return high if value > 0 else low
    if number != number:  # NaN
        return default
    return min(max(number, low), high)


def _as_choice(value: Any, allowed: list[str], default: str) -> str:
    return value if isinstance(value, str) and value in allowed else default


# Stage 2: per-field defaults


def fill_context_defaults(parsed: dict[str, Any]) -> ExtractedContext:
    return ExtractedContext(
        summary=_as_str(parsed.get("summary"), CONTEXT_DEFAULT_SUMMARY),
        key_points=_as_str_list(parsed.get("keyPoints")),
        emotional_tone=_as_choice(
            parsed.get("emotionalTone"), EmotionalTone.values(), EmotionalTone.NEUTRAL.value
        ),
        topics=_as_str_list(parsed.get("topics")),
        action_items=_as_str_list(parsed.get("actionItems")),
        relationship_insights=_as_str_list(parsed.get("relationshipInsights")),
        confidence_score=_as_number(parsed.get("confidenceScore"), PARTIAL_CONFIDENCE, 0.0, 1.0),
    )


def _neutral_scores(interactions: Sequence[InteractionInput]) -> list[SentimentScore]:
    return [
        SentimentScore(id=i.id, sentiment=EmotionalTone.NEUTRAL.value, confidence=FALLBACK_CONFIDENCE)
        for i in interactions
    ]


def _fill_scores(value: Any, interactions: Sequence[InteractionInput]) -> list[SentimentScore]:
    if not isinstance(value, list):
        return _neutral_scores(interactions)
    scores: list[SentimentScore] = []
    for item in value:
        if not isinstance(item, dict):
            continue
        scores.append(
            SentimentScore(
                id=str(item.get("id", "")),
                sentiment=_as_choice(
                    item.get("sentiment"), EmotionalTone.values(), EmotionalTone.NEUTRAL.value
                ),
                confidence=_as_number(item.get("confidence"), FALLBACK_CONFIDENCE, 0.0, 1.0),
            )
        )
    return scores


def fill_sentiment_defaults(
    parsed: dict[str, Any], interactions: Sequence[InteractionInput]
) -> SentimentAnalysisResult:
    """Default every sentiment field; missing per-interaction scores become neutral 0.5."""
    return SentimentAnalysisResult(
        overall_sentiment=_as_choice(
            parsed.get("overallSentiment"), EmotionalTone.values(), EmotionalTone.NEUTRAL.value
        ),
        sentiment_trend=_as_choice(
            parsed.get("sentimentTrend"), SentimentTrend.values(), SentimentTrend.STABLE.value
        ),
        individual_scores=_fill_scores(parsed.get("individualScores"), interactions),
        insights=_as_str_list(parsed.get("insights")),
        confidence=_as_number(parsed.get("confidence"), PARTIAL_CONFIDENCE, 0.0, 1.0),
    )


def fill_insights_defaults(parsed: dict[str, Any]) -> InsightsResult:
    return InsightsResult(
        health_score=_as_number(
            parsed.get("healthScore"), FALLBACK_HEALTH_SCORE, 0.0, MAX_HEALTH_SCORE
        ),
        health_trend=_as_choice(
            parsed.get("healthTrend"), SentimentTrend.values(), SentimentTrend.STABLE.value
        ),
        communication_patterns=_as_str_list(parsed.get("communicationPatterns")),
        engagement_level=_as_choice(
            parsed.get("engagementLevel"), EngagementLevel.values(), EngagementLevel.MEDIUM.value
        ),
        strengths=_as_str_list(parsed.get("strengths")),
        improvements=_as_str_list(parsed.get("improvements")),
        recommendations=_as_str_list(parsed.get("recommendations")),
        suggested_actions=_as_str_list(parsed.get("suggestedActions")),
        risk_factors=_as_str_list(parsed.get("riskFactors")),
        opportunities=_as_str_list(parsed.get("opportunities")),
        confidence=_as_number(parsed.get("confidence"), PARTIAL_CONFIDENCE, 0.0, 1.0),
    )


# Fallbacks


def context_fallback() -> ExtractedContext:
    return ExtractedContext(
        summary=CONTEXT_FALLBACK_SUMMARY,
        key_points=[],
        emotional_tone=EmotionalTone.NEUTRAL.value,
        topics=[],
        action_items=[],
        relationship_insights=[],
        confidence_score=FALLBACK_CONFIDENCE,
    )


def sentiment_fallback(interactions: Sequence[InteractionInput]) -> SentimentAnalysisResult:
    return SentimentAnalysisResult(
        overall_sentiment=EmotionalTone.NEUTRAL.value,
        sentiment_trend=SentimentTrend.STABLE.value,
        individual_scores=_neutral_scores(interactions),
        insights=[],
        confidence=FALLBACK_CONFIDENCE,
    )


def insights_fallback() -> InsightsResult:
    return InsightsResult(
        health_score=FALLBACK_HEALTH_SCORE,
        health_trend=SentimentTrend.STABLE.value,
        communication_patterns=[],
        engagement_level=EngagementLevel.MEDIUM.value,
        strengths=[],
        improvements=[],
        recommendations=[],
        suggested_actions=[],
        risk_factors=[],
        opportunities=[],
        confidence=FALLBACK_CONFIDENCE,
    )


# Composed parsers


def parse_context_response(raw: str) -> ExtractedContext:
    parsed = extract_json_object(raw)
    if parsed is None:
        logger.warning("Failed to parse context response; using fallback (length=%d)", _length(raw))
        return context_fallback()
    return fill_context_defaults(parsed)


def parse_sentiment_response(
    raw: str, interactions: Sequence[InteractionInput]
) -> SentimentAnalysisResult:
    parsed = extract_json_object(raw)
    if parsed is None:
        logger.warning("Failed to parse sentiment response; using fallback (length=%d)", _length(raw))
        return sentiment_fallback(interactions)
    return fill_sentiment_defaults(parsed, interactions)


def parse_insights_response(raw: str) -> InsightsResult:
    parsed = extract_json_object(raw)
    if parsed is None:
        logger.warning("Failed to parse insights response; using fallback (length=%d)", _length(raw))
        return insights_fallback()
    return fill_insights_defaults(parsed)


def _length(raw: Any) -> int:
    return len(raw) if isinstance(raw, str) else 0

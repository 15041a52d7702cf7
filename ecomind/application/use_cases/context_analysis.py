"""AI context analysis use cases: context extraction, sentiment and relationship insights.

Each operation validates the caller and input, requires a configured text
model, and then runs behind the consent gate (audit first, model call
second). Results are persisted to the relationship's history when a person
is given (insights always are).
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence
from typing import Any

from ecomind.application.dtos.ai import (
    ExtractedContext,
    InsightsResult,
    InteractionInput,
    RelationshipBundle,
    SentimentAnalysisResult,
)
from ecomind.application.dtos.user import AuthenticatedUser
from ecomind.application.interfaces.repositories import IRelationshipRepository
from ecomind.application.interfaces.services import ITextGenerator
from ecomind.application.services.consent_gate import ConsentGate
from ecomind.application.services.prompt_builder import (
    EXTRACTION_PARAMS,
    INSIGHTS_PARAMS,
    SENTIMENT_PARAMS,
    build_extraction_prompt,
    build_insights_prompt,
    build_sentiment_prompt,
)
from ecomind.application.services.response_parser import (
    parse_context_response,
    parse_insights_response,
    parse_sentiment_response,
)
from ecomind.application.use_cases._guards import require_owner, run_consented_ai_operation
from ecomind.domain.collections import (
    SUBCOLLECTION_CONTEXT_EXTRACTIONS,
    SUBCOLLECTION_INSIGHTS,
    SUBCOLLECTION_INTERACTIONS,
    SUBCOLLECTION_SENTIMENT_ANALYSES,
)
from ecomind.domain.enums import AIOperation, AnalysisType
from ecomind.domain.exceptions import (
    FailedPreconditionException,
    InvalidArgumentException,
    NotFoundException,
)
from ecomind.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

# History windows read for an insights run (newest first).
INSIGHTS_INTERACTION_LIMIT = 20
INSIGHTS_CONTEXT_LIMIT = 10
INSIGHTS_SENTIMENT_LIMIT = 5


class ContextAnalysisService:
    def __init__(
        self,
        gate: ConsentGate,
        text_generator: ITextGenerator | None,
        relationship_repo: IRelationshipRepository,
    ) -> None:
        self._gate = gate
        self._generator = text_generator
        self._relationship_repo = relationship_repo

    def _require_generator(self) -> ITextGenerator:
        if self._generator is None:
            raise FailedPreconditionException()
        return self._generator

    async def extract_context_from_text(
        self,
        actor: AuthenticatedUser | None,
        user_id: str,
        text: str,
        person_id: str | None = None,
        interaction_type: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ExtractedContext:
        """Summarize a conversation or note into structured relationship context."""
        require_owner(actor, user_id, "User can only extract context for their own data")
        if not text or not text.strip():
            raise InvalidArgumentException("Text content is required", field="text")
        generator = self._require_generator()

        async def action() -> ExtractedContext:
            prompt = build_extraction_prompt(text, interaction_type, metadata)
            raw = await generator.generate_text(prompt, EXTRACTION_PARAMS)
            context = dataclasses.replace(parse_context_response(raw), extracted_at=utc_now())
            if person_id:
                await self._relationship_repo.append_history(
                    user_id,
                    person_id,
                    SUBCOLLECTION_CONTEXT_EXTRACTIONS,
                    {
                        **context.to_dict(),
                        "originalText": text,
                        "interactionType": interaction_type,
                        "metadata": metadata or {},
                    },
                )
            return context

        return await run_consented_ai_operation(
            self._gate,
            AIOperation.CONTEXT_EXTRACTION,
            user_id,
            len(text),
            "Failed to extract context",
            action,
        )

    async def analyze_interaction_sentiment(
        self,
        actor: AuthenticatedUser | None,
        user_id: str,
        interactions: Sequence[InteractionInput],
        person_id: str | None = None,
    ) -> SentimentAnalysisResult:
        """Score each interaction and the overall trend across them (chronological input)."""
        require_owner(actor, user_id)
        if not interactions:
            raise InvalidArgumentException("At least one interaction is required", field="interactions")
        generator = self._require_generator()

        async def action() -> SentimentAnalysisResult:
            prompt = build_sentiment_prompt(interactions)
            raw = await generator.generate_text(prompt, SENTIMENT_PARAMS)
            result = dataclasses.replace(
                parse_sentiment_response(raw, interactions), analysis_date=utc_now()
            )
            if person_id:
                await self._relationship_repo.append_history(
                    user_id, person_id, SUBCOLLECTION_SENTIMENT_ANALYSES, result.to_dict()
                )
            return result

        return await run_consented_ai_operation(
            self._gate,
            AIOperation.SENTIMENT_ANALYSIS,
            user_id,
            sum(len(i.text) for i in interactions),
            "Sentiment analysis failed",
            action,
        )

    async def generate_relationship_insights(
        self,
        actor: AuthenticatedUser | None,
        user_id: str,
        person_id: str,
        analysis_type: str | None = None,
    ) -> InsightsResult:
        """Assess relationship health from the relationship and its recent history."""
        require_owner(actor, user_id)
        if not person_id or not person_id.strip():
            raise InvalidArgumentException("personId is required", field="personId")
        analysis = analysis_type or AnalysisType.COMPREHENSIVE.value
        if analysis not in AnalysisType.values():
            raise InvalidArgumentException(
                f"analysisType must be one of {AnalysisType.values()}", field="analysisType"
            )
        generator = self._require_generator()

        async def action() -> InsightsResult:
            bundle = await self._gather(user_id, person_id, analysis)
            raw = await generator.generate_text(build_insights_prompt(bundle), INSIGHTS_PARAMS)
            parsed = parse_insights_response(raw)
            result = dataclasses.replace(parsed, analysis_type=analysis, generated_at=utc_now())
            await self._relationship_repo.append_history(
                user_id, person_id, SUBCOLLECTION_INSIGHTS, result.to_dict()
            )
            return result

        return await run_consented_ai_operation(
            self._gate,
            AIOperation.INSIGHTS_GENERATION,
            user_id,
            0,
            "Insights generation failed",
            action,
        )

    async def _gather(self, user_id: str, person_id: str, analysis_type: str) -> RelationshipBundle:
        repo = self._relationship_repo
        relationship = await repo.get_relationship(user_id, person_id)
        if relationship is None:
            raise NotFoundException("relationship", person_id, "Relationship not found")
        return RelationshipBundle(
            relationship=relationship,
            interactions=await repo.recent_history(
                user_id, person_id, SUBCOLLECTION_INTERACTIONS, "timestamp", INSIGHTS_INTERACTION_LIMIT
            ),
            contexts=await repo.recent_history(
                user_id, person_id, SUBCOLLECTION_CONTEXT_EXTRACTIONS, "extractedAt", INSIGHTS_CONTEXT_LIMIT
            ),
            sentiments=await repo.recent_history(
                user_id, person_id, SUBCOLLECTION_SENTIMENT_ANALYSES, "analysisDate", INSIGHTS_SENTIMENT_LIMIT
            ),
            analysis_type=analysis_type,
        )

"""AI API: consent-gated context analysis and embeddings."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from ecomind.api.v1.dependencies import (
    CurrentUserDep,
    SettingsDep,
    get_context_analysis_service,
    get_embedding_model,
    get_embedding_service,
    require_authenticated,
)
from ecomind.application.interfaces.services import IEmbeddingModel
from ecomind.application.use_cases import (
    ContextAnalysisService,
    EmbeddingService,
    check_embedding_service_health,
)
from ecomind.core.limiter import limit_ai
from ecomind.schemas.ai import (
    BatchEmbeddingRequest,
    BatchEmbeddingResponse,
    ContextExtractionRequest,
    EmbeddingHealthResponse,
    EmbeddingRequest,
    EmbeddingResponse,
    ExtractedContextResponse,
    RelationshipInsightsRequest,
    RelationshipInsightsResponse,
    SentimentAnalysisRequest,
    SentimentAnalysisResponse,
)

router = APIRouter()

_authenticated = [Depends(require_authenticated)]


@router.post(
    "/context-extractions",
    response_model=ExtractedContextResponse,
    dependencies=_authenticated,
)
@limit_ai
async def extract_context(
    request: Request,
    body: ContextExtractionRequest,
    current_user: CurrentUserDep,
    analysis_svc: Annotated[ContextAnalysisService, Depends(get_context_analysis_service)],
):
    """Extract summary, key points, tone, topics and action items from text."""
    result = await analysis_svc.extract_context_from_text(
        current_user,
        body.user_id,
        body.text,
        person_id=body.person_id,
        interaction_type=body.interaction_type,
        metadata=body.metadata,
    )
    return result.to_dict()


@router.post(
    "/sentiment-analyses",
    response_model=SentimentAnalysisResponse,
    dependencies=_authenticated,
)
@limit_ai
async def analyze_sentiment(
    request: Request,
    body: SentimentAnalysisRequest,
    current_user: CurrentUserDep,
    analysis_svc: Annotated[ContextAnalysisService, Depends(get_context_analysis_service)],
):
    result = await analysis_svc.analyze_interaction_sentiment(
        current_user,
        body.user_id,
        [i.to_input() for i in body.interactions],
        person_id=body.person_id,
    )
    return result.to_dict()


@router.post(
    "/relationship-insights",
    response_model=RelationshipInsightsResponse,
    dependencies=_authenticated,
)
@limit_ai
async def generate_insights(
    request: Request,
    body: RelationshipInsightsRequest,
    current_user: CurrentUserDep,
    analysis_svc: Annotated[ContextAnalysisService, Depends(get_context_analysis_service)],
):
    """Relationship health score, patterns and recommendations (stored under insights)."""
    result = await analysis_svc.generate_relationship_insights(
        current_user, body.user_id, body.person_id, body.analysis_type
    )
    return result.to_dict()


@router.post(
    "/embeddings",
    response_model=EmbeddingResponse,
    dependencies=_authenticated,
)
@limit_ai
async def generate_embedding(
    request: Request,
    body: EmbeddingRequest,
    current_user: CurrentUserDep,
    embedding_svc: Annotated[EmbeddingService, Depends(get_embedding_service)],
):
    result = await embedding_svc.generate_embedding(
        current_user, body.user_id, body.content, body.content_type
    )
    return result.to_dict()


@router.post(
    "/embeddings/batch",
    response_model=BatchEmbeddingResponse,
    dependencies=_authenticated,
)
@limit_ai
async def generate_batch_embeddings(
    request: Request,
    body: BatchEmbeddingRequest,
    current_user: CurrentUserDep,
    embedding_svc: Annotated[EmbeddingService, Depends(get_embedding_service)],
):
    """Embed up to 100 texts; per-item failures are reported in errors."""
    result = await embedding_svc.generate_batch_embeddings(
        current_user, body.user_id, body.contents, body.content_type
    )
    return result.to_dict()


@router.get("/embeddings/health", response_model=EmbeddingHealthResponse)
async def embedding_health(
    model: Annotated[IEmbeddingModel | None, Depends(get_embedding_model)],
    settings: SettingsDep,
):
    """Probe the embedding model. Always 200; see healthy."""
    return await check_embedding_service_health(model, settings.embedding_dimensions)

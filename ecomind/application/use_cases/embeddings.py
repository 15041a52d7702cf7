"""Embedding use cases: single, batch and a provider health probe."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from typing import Any

from ecomind.application.dtos.ai import BatchEmbeddingResult, EmbeddingResult
from ecomind.application.dtos.user import AuthenticatedUser
from ecomind.application.interfaces.services import IEmbeddingModel
from ecomind.application.services.consent_gate import ConsentGate
from ecomind.application.services.prompt_builder import preprocess_embedding_content
from ecomind.application.use_cases._guards import require_owner, run_consented_ai_operation
from ecomind.domain.enums import AIOperation, EmbeddingContentType
from ecomind.domain.exceptions import (
    FailedPreconditionException,
    InternalException,
    InvalidArgumentException,
)
from ecomind.shared.utils.datetime import utc_now_iso

logger = logging.getLogger(__name__)

HEALTH_PROBE_TEXT = "Health check test for embedding service"


class EmbeddingService:
    """Vector embeddings for relationship content (semantic search on the client)."""

    def __init__(
        self,
        gate: ConsentGate,
        model: IEmbeddingModel | None,
        *,
        dimensions: int = 768,
        max_content_length: int = 2000,
        max_batch_items: int = 100,
        chunk_size: int = 10,
        batch_timeout_seconds: float = 300.0,
    ) -> None:
        self._gate = gate
        self._model = model
        self._dimensions = dimensions
        self._max_length = max_content_length
        self._max_items = max_batch_items
        self._chunk_size = chunk_size
        self._batch_timeout = batch_timeout_seconds

    def _require_model(self) -> IEmbeddingModel:
        if self._model is None:
            raise FailedPreconditionException()
        return self._model

    @staticmethod
    def _validate_content_type(content_type: str | None) -> None:
        if content_type is not None and content_type not in EmbeddingContentType.values():
            raise InvalidArgumentException(
                f"contentType must be one of {EmbeddingContentType.values()}", field="contentType"
            )

    async def _embed_checked(self, model: IEmbeddingModel, text: str) -> list[float]:
        vector = await model.embed(text)
        if len(vector) != self._dimensions:
            raise InternalException(
                f"Invalid embedding dimensions: {len(vector)}, expected {self._dimensions}",
                operation=AIOperation.EMBEDDING_GENERATION.value,
            )
        return vector

    async def generate_embedding(
        self,
        actor: AuthenticatedUser | None,
        user_id: str,
        content: str,
        content_type: str | None = None,
    ) -> EmbeddingResult:
        require_owner(actor, user_id)
        if not isinstance(content, str) or not content.strip():
            raise InvalidArgumentException("Content is required and must be a string", field="content")
        if len(content) > self._max_length:
            raise InvalidArgumentException(
                f"Content exceeds maximum length of {self._max_length} characters", field="content"
            )
        self._validate_content_type(content_type)
        model = self._require_model()

        async def action() -> EmbeddingResult:
            started = time.perf_counter()
            processed = preprocess_embedding_content(content, content_type, self._max_length)
            vector = await self._embed_checked(model, processed)
            return EmbeddingResult(
                embedding=vector,
                model=model.model_name,
                processing_time_ms=int((time.perf_counter() - started) * 1000),
                token_count=len(processed),
            )

        return await run_consented_ai_operation(
            self._gate,
            AIOperation.EMBEDDING_GENERATION,
            user_id,
            len(content),
            "Embedding generation failed",
            action,
        )

    async def generate_batch_embeddings(
        self,
        actor: AuthenticatedUser | None,
        user_id: str,
        contents: Sequence[str],
        content_type: str | None = None,
    ) -> BatchEmbeddingResult:
        """Embed up to max_batch_items texts; one failing item never fails the batch.

        Items run in sub-batches of chunk_size: sequential between sub-batches,
        concurrent inside one.
        """
        require_owner(actor, user_id)
        if not contents:
            raise InvalidArgumentException(
                "Contents array is required and must not be empty", field="contents"
            )
        if len(contents) > self._max_items:
            raise InvalidArgumentException(
                f"Batch size cannot exceed {self._max_items} items", field="contents"
            )
        self._validate_content_type(content_type)
        model = self._require_model()

        async def embed_one(item: Any) -> tuple[list[float] | None, str | None]:
            if not isinstance(item, str) or not item.strip():
                return None, "Content is required and must be a string"
            try:
                processed = preprocess_embedding_content(item, content_type, self._max_length)
                return await self._embed_checked(model, processed), None
            except Exception as e:
                message = getattr(e, "message", None) or str(e) or type(e).__name__
                return None, message

        async def run_all() -> BatchEmbeddingResult:
            embeddings: list[list[float] | None] = []
            errors: list[str | None] = []
            for start in range(0, len(contents), self._chunk_size):
                chunk = contents[start : start + self._chunk_size]
                for vector, error in await asyncio.gather(*(embed_one(c) for c in chunk)):
                    embeddings.append(vector)
                    errors.append(error)
            return BatchEmbeddingResult(embeddings=embeddings, errors=errors)

        async def action() -> BatchEmbeddingResult:
            result = await asyncio.wait_for(run_all(), timeout=self._batch_timeout)
            logger.info(
                "Batch embedding generation completed",
                extra={
                    "user_id": user_id,
                    "total_items": len(contents),
                    "success_count": result.success_count,
                    "error_count": result.error_count,
                },
            )
            return result

        return await run_consented_ai_operation(
            self._gate,
            AIOperation.EMBEDDING_GENERATION,
            user_id,
            sum(len(c) for c in contents if isinstance(c, str)),
            "Batch embedding generation failed",
            action,
        )


async def check_embedding_service_health(
    model: IEmbeddingModel | None, dimensions: int = 768
) -> dict[str, Any]:
    """Embed a fixed probe text and report latency and dimensions. Never raises.

    Needs no user, consent or data store, so it is usable as a readiness probe.
    """
    if model is None:
        return {
            "healthy": False,
            "error": "AI service is not configured",
            "timestamp": utc_now_iso(),
        }
    started = time.perf_counter()
    try:
        vector = await model.embed(HEALTH_PROBE_TEXT)
    except Exception as e:
        logger.error(
            "Embedding service health check failed", extra={"error_type": type(e).__name__}
        )
        return {
            "healthy": False,
            "error": str(e) or type(e).__name__,
            "timestamp": utc_now_iso(),
        }
    response_time = int((time.perf_counter() - started) * 1000)
    healthy = len(vector) == dimensions
    logger.info(
        "Embedding service health check",
        extra={"healthy": healthy, "response_time_ms": response_time, "dimensions": len(vector)},
    )
    return {
        "healthy": healthy,
        "responseTime": response_time,
        "model": model.model_name,
        "dimensions": len(vector),
        "timestamp": utc_now_iso(),
    }

"""Application lifespan: startup and shutdown.

Single place that builds the external clients (Firestore, Gemini, token
verifier) and stores them on app.state; no business logic here. A missing
credential leaves the matching client as None, and the operations that need
it fail with failed-precondition.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from ecomind.core.config import get_settings
from ecomind.infrastructure.ai.gemini_client import (
    GeminiEmbeddingModel,
    GeminiTextGenerator,
    create_genai_client,
)
from ecomind.infrastructure.firebase.client import create_firestore_client
from ecomind.infrastructure.security.firebase_auth import FirebaseTokenVerifier

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit close what startup opened."""
    settings = get_settings()

    # ---- Startup ----
    firestore = create_firestore_client(settings)
    app.state.firestore = firestore
    if firestore is None:
        logger.warning("Firestore not configured; data operations are unavailable")

    project_id = settings.firebase_project_id or (firestore.project_id if firestore else None)
    app.state.token_verifier = FirebaseTokenVerifier(project_id) if project_id else None

    app.state.text_generator = None
    app.state.embedding_model = None
    if settings.ai_enabled:
        genai_client = create_genai_client(settings.gemini_api_key.get_secret_value())
        app.state.text_generator = GeminiTextGenerator(
            genai_client, settings.gemini_model, settings.ai_request_timeout_seconds
        )
        app.state.embedding_model = GeminiEmbeddingModel(
            genai_client,
            settings.embedding_model,
            settings.embedding_dimensions,
            settings.ai_request_timeout_seconds,
        )
        logger.info("Gemini configured (model=%s)", settings.gemini_model)
    else:
        logger.warning("GEMINI_API_KEY not set; AI operations are unavailable")

    yield

    # ---- Shutdown ----
    if getattr(app.state, "firestore", None) is not None:
        await app.state.firestore.aclose()
        app.state.firestore = None
        logger.info("Firestore HTTP client closed")

"""AI provider adapters."""

from ecomind.infrastructure.ai.gemini_client import (
    GeminiEmbeddingModel,
    GeminiTextGenerator,
    create_genai_client,
)

__all__ = [
    "GeminiEmbeddingModel",
    "GeminiTextGenerator",
    "create_genai_client",
]

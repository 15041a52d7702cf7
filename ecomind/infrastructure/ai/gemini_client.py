"""Gemini adapters (google-genai SDK): text completion and embeddings.

Both implement the application ports (ITextGenerator, IEmbeddingModel). Every
provider-side failure, including a timeout, surfaces as AIProviderError; no
retries happen here.
"""

from __future__ import annotations

import asyncio
import logging

from google import genai
from google.genai import types

from ecomind.application.interfaces.services import AIProviderError, GenerationParams

logger = logging.getLogger(__name__)


def create_genai_client(api_key: str) -> genai.Client:
    """Build the shared SDK client (one per process, created by the lifespan)."""
    return genai.Client(api_key=api_key)


class GeminiTextGenerator:
    """Text completion against a Gemini model."""

    def __init__(self, client: genai.Client, model: str, timeout_seconds: float = 60.0) -> None:
        self._client = client
        self._model = model
        self._timeout = timeout_seconds

    async def generate_text(self, prompt: str, params: GenerationParams) -> str:
        config = types.GenerateContentConfig(
            temperature=params.temperature,
            top_k=params.top_k,
            top_p=params.top_p,
            max_output_tokens=params.max_output_tokens,
        )
        try:
            response = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=self._model, contents=prompt, config=config
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            raise AIProviderError(f"Gemini request timed out after {self._timeout}s") from e
        except Exception as e:
            raise AIProviderError(f"Gemini request failed: {type(e).__name__}") from e
        text = response.text
        if not text:
            raise AIProviderError("Gemini returned an empty response")
        return text


class GeminiEmbeddingModel:
    """Text embeddings with a fixed output dimensionality."""

    def __init__(
        self,
        client: genai.Client,
        model: str,
        dimensions: int = 768,
        timeout_seconds: float = 60.0,
    ) -> None:
        self._client = client
        self._model = model
        self._dimensions = dimensions
        self._timeout = timeout_seconds

    @property
    def model_name(self) -> str:
        return self._model

    async def embed(self, text: str) -> list[float]:
        config = types.EmbedContentConfig(output_dimensionality=self._dimensions)
        try:
            response = await asyncio.wait_for(
                self._client.aio.models.embed_content(
                    model=self._model, contents=text, config=config
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            raise AIProviderError(f"Embedding request timed out after {self._timeout}s") from e
        except Exception as e:
            raise AIProviderError(f"Embedding request failed: {type(e).__name__}") from e
        if not response.embeddings or response.embeddings[0].values is None:
            raise AIProviderError("Embedding response contained no values")
        return list(response.embeddings[0].values)

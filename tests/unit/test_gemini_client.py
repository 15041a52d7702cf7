"""Gemini adapter tests with a mocked google-genai client."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from ecomind.application.interfaces.services import AIProviderError, GenerationParams
from ecomind.infrastructure.ai.gemini_client import GeminiEmbeddingModel, GeminiTextGenerator


def _genai_client() -> MagicMock:
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock()
    client.aio.models.embed_content = AsyncMock()
    return client


async def test_generate_text_passes_sampling_config() -> None:
    client = _genai_client()
    client.aio.models.generate_content.return_value = SimpleNamespace(text='{"summary": "ok"}')
    generator = GeminiTextGenerator(client, "gemini-1.5-flash")
    params = GenerationParams(temperature=0.3, top_k=32, top_p=0.9, max_output_tokens=1024)

    text = await generator.generate_text("prompt", params)
    assert text == '{"summary": "ok"}'
    kwargs = client.aio.models.generate_content.await_args.kwargs
    assert kwargs["model"] == "gemini-1.5-flash"
    assert kwargs["contents"] == "prompt"
    assert kwargs["config"].temperature == 0.3
    assert kwargs["config"].top_k == 32
    assert kwargs["config"].max_output_tokens == 1024


async def test_generate_text_wraps_provider_errors() -> None:
    client = _genai_client()
    client.aio.models.generate_content.side_effect = RuntimeError("403 API key invalid")
    generator = GeminiTextGenerator(client, "gemini-1.5-flash")
    with pytest.raises(AIProviderError) as exc_info:
        await generator.generate_text("prompt", GenerationParams(temperature=0.3))
    assert "API key" not in str(exc_info.value)


async def test_generate_text_empty_response() -> None:
    client = _genai_client()
    client.aio.models.generate_content.return_value = SimpleNamespace(text=None)
    with pytest.raises(AIProviderError):
        await GeminiTextGenerator(client, "m").generate_text("p", GenerationParams(temperature=0.3))


async def test_generate_text_timeout() -> None:
    client = _genai_client()

    async def slow(**kwargs):
        await asyncio.sleep(1)

    client.aio.models.generate_content.side_effect = slow
    generator = GeminiTextGenerator(client, "m", timeout_seconds=0.01)
    with pytest.raises(AIProviderError) as exc_info:
        await generator.generate_text("p", GenerationParams(temperature=0.3))
    assert "timed out" in str(exc_info.value)


async def test_embed_requests_dimensions() -> None:
    client = _genai_client()
    client.aio.models.embed_content.return_value = SimpleNamespace(
        embeddings=[SimpleNamespace(values=[0.5] * 768)]
    )
    model = GeminiEmbeddingModel(client, "text-embedding-004", dimensions=768)
    vector = await model.embed("hello")
    assert vector == [0.5] * 768
    assert model.model_name == "text-embedding-004"
    kwargs = client.aio.models.embed_content.await_args.kwargs
    assert kwargs["contents"] == "hello"
    assert kwargs["config"].output_dimensionality == 768


async def test_embed_without_values() -> None:
    client = _genai_client()
    client.aio.models.embed_content.return_value = SimpleNamespace(embeddings=[])
    with pytest.raises(AIProviderError):
        await GeminiEmbeddingModel(client, "text-embedding-004").embed("hello")

"""Service interfaces (ports) for the application layer.

Protocols for the external AI provider and the identity verifier (DIP).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ecomind.application.dtos.user import AuthenticatedUser


@dataclass(frozen=True)
class GenerationParams:
    """Sampling parameters for one text-completion call."""

    temperature: float
    top_k: int | None = None
    top_p: float | None = None
    max_output_tokens: int | None = None


class AIProviderError(Exception):
    """Raised by AI adapters for any provider-side failure (network, auth, quota, bad response)."""


# Text completion
class ITextGenerator(Protocol):
    """Protocol for a hosted text-completion model."""

    async def generate_text(self, prompt: str, params: GenerationParams) -> str:
        """Return the model's free-text completion for prompt. Raises AIProviderError."""


# Embeddings
class IEmbeddingModel(Protocol):
    """Protocol for a hosted text-embedding model."""

    @property
    def model_name(self) -> str:
        """Name reported back to callers (e.g. text-embedding-004)."""

    async def embed(self, text: str) -> list[float]:
        """Return the embedding vector for text. Raises AIProviderError."""


# Identity
class IIdentityVerifier(Protocol):
    """Protocol for verifying bearer tokens issued by the identity provider."""

    async def verify(self, token: str) -> AuthenticatedUser:
        """Return the caller identity; raise ValueError when the token is invalid or expired."""

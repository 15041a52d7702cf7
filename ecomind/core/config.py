"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Nothing is strictly required at load time: without
Firebase credentials the data-store operations fail with
failed-precondition, and without a Gemini key the AI operations do.
"""

import re
from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SEMVER = re.compile(r"^\d+\.\d+\.\d+$")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "ecomind"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False

    # CORS
    allowed_origins: str = "http://localhost:8081,http://localhost:19006"

    # Firebase / Firestore: use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None
    # Audience for ID-token verification; falls back to the service account's project_id.
    firebase_project_id: str | None = None
    # Firestore commit limit per batch (writes).
    firestore_batch_limit: int = 500

    # Gemini
    gemini_api_key: SecretStr | None = None
    gemini_model: str = "gemini-1.5-flash"
    embedding_model: str = "text-embedding-004"
    embedding_dimensions: int = 768
    embedding_max_content_length: int = 2000
    batch_embedding_max_items: int = 100
    batch_embedding_chunk_size: int = 10
    ai_request_timeout_seconds: float = 60.0
    batch_embedding_timeout_seconds: float = 300.0

    # Privacy: version of the consent text users agreed to. Bumping it makes
    # every stored consent stale until the user saves their settings again.
    consent_version: str = "1.0.0"

    # Auth-event hooks and deletion processing (X-Internal-Secret). Unset disables them.
    internal_api_secret: SecretStr | None = None

    # Request
    request_id_header: str = "X-Request-ID"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_versions_and_limits(self) -> "Settings":
        """Validate consent version format and positive limits."""
        if not _SEMVER.match(self.consent_version or ""):
            raise ValueError(
                f"CONSENT_VERSION must look like MAJOR.MINOR.PATCH, got: {self.consent_version!r}"
            )
        for name in (
            "firestore_batch_limit",
            "embedding_dimensions",
            "embedding_max_content_length",
            "batch_embedding_max_items",
            "batch_embedding_chunk_size",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name.upper()} must be positive")
        if self.ai_request_timeout_seconds <= 0 or self.batch_embedding_timeout_seconds <= 0:
            raise ValueError("AI timeouts must be positive")
        return self

    @property
    def ai_enabled(self) -> bool:
        """True when a Gemini API key is configured."""
        return bool(self.gemini_api_key and self.gemini_api_key.get_secret_value())

    @property
    def firestore_enabled(self) -> bool:
        """True when Firebase service account credentials are configured."""
        has_key = bool(
            self.firebase_service_account_key
            and self.firebase_service_account_key.get_secret_value()
        )
        return has_key or bool(self.firebase_service_account_path)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.
    """
    return Settings()

"""Pytest configuration and fixtures for ecomind.

Repositories are in-memory fakes of the application Protocols; the AI
clients are AsyncMocks. HTTP tests run ecomind.main:app over ASGI with the
Firestore-backed providers replaced through app.dependency_overrides, so no
Firebase or Gemini access is needed.
"""

import os
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

# Settings are read when the app is built; pin the values tests rely on.
os.environ["INTERNAL_API_SECRET"] = "test-internal-secret"
os.environ["CONSENT_VERSION"] = "1.0.0"
os.environ.pop("GEMINI_API_KEY", None)
os.environ.pop("FIREBASE_SERVICE_ACCOUNT_KEY", None)
os.environ.pop("FIREBASE_SERVICE_ACCOUNT_PATH", None)

from ecomind.api.v1 import dependencies as deps  # noqa: E402
from ecomind.application.dtos.privacy import PrivacySettings, StoredPrivacySettings  # noqa: E402
from ecomind.application.dtos.user import AuthenticatedUser  # noqa: E402
from ecomind.application.interfaces.repositories import (  # noqa: E402
    ConcurrentModificationError,
    DocumentTarget,
)
from ecomind.application.services import AuditLogger, ConsentGate, PrivacySettingsStore  # noqa: E402
from ecomind.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from ecomind.core.limiter import limiter  # noqa: E402
from ecomind.main import app  # noqa: E402

CONSENT_VERSION = "1.0.0"
INTERNAL_SECRET = "test-internal-secret"
EMBEDDING_DIMENSIONS = 768


class InMemoryPrivacySettingsRepository:
    """Versioned settings store; ``conflicts`` makes the next N replaces lose a race."""

    def __init__(self) -> None:
        self.docs: dict[str, tuple[PrivacySettings, int]] = {}
        self.conflicts = 0
        self.fail_reads = False

    def seed(self, user_id: str, settings: PrivacySettings) -> None:
        self.docs[user_id] = (settings, 1)

    async def get(self, user_id: str) -> StoredPrivacySettings | None:
        if self.fail_reads:
            raise RuntimeError("store unavailable")
        if user_id not in self.docs:
            return None
        settings, version = self.docs[user_id]
        return StoredPrivacySettings(settings, str(version))

    async def create(self, user_id: str, settings: PrivacySettings) -> str | None:
        if user_id in self.docs:
            raise ConcurrentModificationError(user_id)
        self.docs[user_id] = (settings, 1)
        return "1"

    async def replace(self, user_id: str, settings: PrivacySettings, version: str | None) -> str | None:
        current = self.docs.get(user_id)
        if self.conflicts > 0:
            self.conflicts -= 1
            raise ConcurrentModificationError(user_id)
        if version is not None and (current is None or str(current[1]) != version):
            raise ConcurrentModificationError(user_id)
        new_version = (current[1] if current else 0) + 1
        self.docs[user_id] = (settings, new_version)
        return str(new_version)


class InMemoryAuditLogRepository:
    def __init__(self) -> None:
        self.entries: list[tuple[str, str, dict[str, Any]]] = []
        self.account_events: list[tuple[str, dict[str, Any]]] = []
        self.fail = False

    async def append(self, user_id: str, key: str, entry: dict[str, Any]) -> None:
        if self.fail:
            raise RuntimeError("audit store unavailable")
        self.entries.append((user_id, key, entry))

    async def append_account_event(self, key: str, entry: dict[str, Any]) -> None:
        if self.fail:
            raise RuntimeError("audit store unavailable")
        self.account_events.append((key, entry))

    def operations(self, user_id: str | None = None) -> list[str]:
        return [e["operation"] for uid, _, e in self.entries if user_id is None or uid == user_id]


class InMemoryUserProfileRepository:
    def __init__(self) -> None:
        self.profiles: dict[str, dict[str, Any]] = {}
        self.fail_creates = False

    async def get(self, user_id: str) -> dict[str, Any] | None:
        profile = self.profiles.get(user_id)
        return dict(profile) if profile is not None else None

    async def create(self, user_id: str, profile: dict[str, Any]) -> None:
        if self.fail_creates:
            raise RuntimeError("profile store unavailable")
        self.profiles[user_id] = dict(profile)

    async def update_fields(self, user_id: str, fields: dict[str, Any]) -> None:
        if user_id not in self.profiles:
            raise KeyError(user_id)
        profile = self.profiles[user_id]
        for path, value in fields.items():
            parts = path.split(".")
            cursor = profile
            for part in parts[:-1]:
                cursor = cursor.setdefault(part, {})
            cursor[parts[-1]] = value

    async def increment_stats(
        self,
        user_id: str,
        relationships_change: int | None,
        interactions_change: int | None,
        last_active_at: datetime | None,
    ) -> None:
        if user_id not in self.profiles:
            raise KeyError(user_id)
        stats = self.profiles[user_id].setdefault("stats", {})
        if relationships_change is not None:
            stats["totalRelationships"] = stats.get("totalRelationships", 0) + relationships_change
        if interactions_change is not None:
            stats["totalInteractions"] = stats.get("totalInteractions", 0) + interactions_change
        if last_active_at is not None:
            stats["lastActiveAt"] = last_active_at


class InMemoryRelationshipRepository:
    def __init__(self) -> None:
        self.relationships: dict[tuple[str, str], dict[str, Any]] = {}
        self.history: dict[tuple[str, str, str], list[dict[str, Any]]] = {}

    async def get_relationship(self, user_id: str, person_id: str) -> dict[str, Any] | None:
        doc = self.relationships.get((user_id, person_id))
        return {"id": person_id, **doc} if doc is not None else None

    async def recent_history(
        self, user_id: str, person_id: str, subcollection: str, order_field: str, limit: int
    ) -> list[dict[str, Any]]:
        docs = self.history.get((user_id, person_id, subcollection), [])
        ordered = sorted(docs, key=lambda d: str(d.get(order_field, "")), reverse=True)
        return ordered[:limit]

    async def append_history(
        self, user_id: str, person_id: str, subcollection: str, document: dict[str, Any]
    ) -> str:
        docs = self.history.setdefault((user_id, person_id, subcollection), [])
        docs.append(document)
        return f"{subcollection}-{len(docs)}"


class InMemoryUserDataRepository:
    """Per-user subcollections as dicts; deletion counts commits like the batched writer."""

    def __init__(self, profiles: InMemoryUserProfileRepository) -> None:
        self.docs: dict[tuple[str, str], dict[str, dict[str, Any]]] = {}
        self.profiles = profiles
        self.deleted: list[DocumentTarget] = []
        self.fail_deletes = False

    def seed(self, user_id: str, subcollection: str, doc_id: str, data: dict[str, Any]) -> None:
        self.docs.setdefault((user_id, subcollection), {})[doc_id] = data

    async def list_documents(self, user_id: str, subcollection: str) -> list[tuple[str, dict[str, Any]]]:
        return list(self.docs.get((user_id, subcollection), {}).items())

    async def delete_documents(
        self, user_id: str, targets: list[DocumentTarget], batch_limit: int
    ) -> int:
        if self.fail_deletes:
            raise RuntimeError("commit failed")
        for target in targets:
            if target.subcollection is None:
                self.profiles.profiles.pop(user_id, None)
            else:
                self.docs.get((user_id, target.subcollection), {}).pop(target.document_id, None)
            self.deleted.append(target)
        return (len(targets) + batch_limit - 1) // batch_limit


class InMemoryDeletionRequestRepository:
    def __init__(self) -> None:
        self.requests: dict[str, dict[str, Any]] = {}

    async def create(self, request_id: str, document: dict[str, Any]) -> None:
        self.requests[request_id] = dict(document)

    async def get(self, request_id: str) -> dict[str, Any] | None:
        doc = self.requests.get(request_id)
        return dict(doc) if doc is not None else None

    async def update_status(self, request_id: str, fields: dict[str, Any]) -> None:
        self.requests.setdefault(request_id, {}).update(fields)


class FakeTokenVerifier:
    """Accepts ``token-<uid>`` bearer tokens."""

    async def verify(self, token: str) -> AuthenticatedUser:
        if not token.startswith("token-"):
            raise ValueError("Invalid token")
        uid = token.removeprefix("token-")
        return AuthenticatedUser(uid=uid, email=f"{uid}@example.com")


def consent_settings(ai_processing: bool = True, consent_version: str = CONSENT_VERSION) -> PrivacySettings:
    return PrivacySettings(
        data_collection=True,
        ai_processing=ai_processing,
        analytics=False,
        crash_reporting=True,
        marketing=False,
        last_updated=datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc),
        consent_version=consent_version,
    )


@pytest.fixture
def repos() -> SimpleNamespace:
    """Fresh in-memory repositories for one test."""
    profiles = InMemoryUserProfileRepository()
    return SimpleNamespace(
        privacy=InMemoryPrivacySettingsRepository(),
        audit=InMemoryAuditLogRepository(),
        profiles=profiles,
        relationships=InMemoryRelationshipRepository(),
        user_data=InMemoryUserDataRepository(profiles),
        deletions=InMemoryDeletionRequestRepository(),
    )


@pytest.fixture
def store(repos: SimpleNamespace) -> PrivacySettingsStore:
    return PrivacySettingsStore(repos.privacy, CONSENT_VERSION)


@pytest.fixture
def audit_logger(repos: SimpleNamespace) -> AuditLogger:
    return AuditLogger(repos.audit)


@pytest.fixture
def gate(store: PrivacySettingsStore, audit_logger: AuditLogger) -> ConsentGate:
    return ConsentGate(store, audit_logger)


@pytest.fixture
def text_generator() -> AsyncMock:
    """Text model mock; set generate_text.return_value per test."""
    generator = AsyncMock()
    generator.generate_text = AsyncMock(return_value="{}")
    return generator


@pytest.fixture
def embedding_model() -> MagicMock:
    model = MagicMock()
    model.model_name = "text-embedding-004"
    model.embed = AsyncMock(return_value=[0.1] * EMBEDDING_DIMENSIONS)
    return model


@pytest.fixture
def alice() -> AuthenticatedUser:
    return AuthenticatedUser(uid="alice", email="alice@example.com")


@pytest.fixture
def grant_consent(repos: SimpleNamespace):
    """Give a user current AI-processing consent."""

    def _grant(user_id: str = "alice") -> None:
        repos.privacy.seed(user_id, consent_settings(ai_processing=True))

    return _grant


@pytest.fixture
async def client(repos: SimpleNamespace, text_generator: AsyncMock, embedding_model: MagicMock) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) with in-memory providers."""
    app.dependency_overrides.update(
        {
            deps.get_privacy_settings_repo: lambda: repos.privacy,
            deps.get_audit_repo: lambda: repos.audit,
            deps.get_user_profile_repo: lambda: repos.profiles,
            deps.get_relationship_repo: lambda: repos.relationships,
            deps.get_user_data_repo: lambda: repos.user_data,
            deps.get_deletion_request_repo: lambda: repos.deletions,
            deps.get_text_generator: lambda: text_generator,
            deps.get_embedding_model: lambda: embedding_model,
            deps.get_token_verifier: lambda: FakeTokenVerifier(),
        }
    )
    limiter.reset()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def bearer(uid: str) -> dict[str, str]:
    return {"Authorization": f"Bearer token-{uid}"}


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Authorization headers for alice."""
    return bearer("alice")


@pytest.fixture
def internal_headers() -> dict[str, str]:
    return {"X-Internal-Secret": INTERNAL_SECRET}


@pytest.fixture
def make_settings():
    """Factory for PrivacySettings records (defaults: AI consent on, current version)."""
    return consent_settings

"""FirebaseTokenVerifier tests (google-auth verification patched out)."""

import pytest

from ecomind.infrastructure.security import firebase_auth
from ecomind.infrastructure.security.firebase_auth import FirebaseTokenVerifier


async def test_verify_returns_identity(monkeypatch) -> None:
    def fake_verify(token: str, project_id: str) -> dict:
        assert project_id == "demo"
        return {"user_id": "alice", "sub": "alice", "email": "alice@example.com"}

    monkeypatch.setattr(firebase_auth, "_verify_sync", fake_verify)
    user = await FirebaseTokenVerifier("demo").verify("id-token")
    assert user.uid == "alice"
    assert user.email == "alice@example.com"
    assert user.claims["sub"] == "alice"


async def test_verify_falls_back_to_sub(monkeypatch) -> None:
    monkeypatch.setattr(firebase_auth, "_verify_sync", lambda token, project_id: {"sub": "bob"})
    assert (await FirebaseTokenVerifier("demo").verify("id-token")).uid == "bob"


async def test_verify_rejects_invalid_token(monkeypatch) -> None:
    def fake_verify(token: str, project_id: str) -> dict:
        raise ValueError("Token expired")

    monkeypatch.setattr(firebase_auth, "_verify_sync", fake_verify)
    with pytest.raises(ValueError):
        await FirebaseTokenVerifier("demo").verify("id-token")


async def test_verify_wraps_transport_errors(monkeypatch) -> None:
    def fake_verify(token: str, project_id: str) -> dict:
        raise ConnectionError("cert fetch failed")

    monkeypatch.setattr(firebase_auth, "_verify_sync", fake_verify)
    with pytest.raises(ValueError) as exc_info:
        await FirebaseTokenVerifier("demo").verify("id-token")
    assert "ConnectionError" in str(exc_info.value)


async def test_verify_rejects_empty_token() -> None:
    with pytest.raises(ValueError):
        await FirebaseTokenVerifier("demo").verify("")

"""PrivacyService unit tests with in-memory repositories."""

import pytest

from ecomind.application.dtos.user import AuthenticatedUser
from ecomind.application.use_cases import PrivacyService
from ecomind.application.use_cases.privacy import MAX_SETTINGS_WRITE_ATTEMPTS
from ecomind.domain.collections import SUBCOLLECTION_PROMPTS, SUBCOLLECTION_RELATIONSHIPS
from ecomind.domain.exceptions import (
    AbortedException,
    InvalidArgumentException,
    PermissionDeniedException,
    UnauthenticatedException,
)
from ecomind.shared.request_audit import RequestMetadata


@pytest.fixture
def privacy_svc(store, audit_logger, repos) -> PrivacyService:
    return PrivacyService(store, audit_logger, repos.profiles, repos.user_data, repos.deletions)


async def test_get_privacy_settings_creates_conservative_defaults(privacy_svc, alice, repos) -> None:
    result = await privacy_svc.get_privacy_settings(alice, "alice")
    assert result["isDefault"] is True
    assert result["consentCurrent"] is True
    settings = result["settings"]
    assert settings["dataCollection"] is True
    assert settings["aiProcessing"] is False
    assert settings["analytics"] is False
    assert settings["crashReporting"] is True
    assert settings["marketing"] is False
    assert settings["consentVersion"] == "1.0.0"
    assert "alice" in repos.privacy.docs


async def test_get_privacy_settings_second_read_is_not_default(privacy_svc, alice) -> None:
    await privacy_svc.get_privacy_settings(alice, "alice")
    result = await privacy_svc.get_privacy_settings(alice, "alice")
    assert result["isDefault"] is False


async def test_get_privacy_settings_reports_stale_consent(privacy_svc, alice, repos, make_settings) -> None:
    repos.privacy.seed("alice", make_settings(consent_version="0.9.0"))
    result = await privacy_svc.get_privacy_settings(alice, "alice")
    assert result["consentCurrent"] is False


async def test_get_privacy_settings_requires_auth(privacy_svc) -> None:
    with pytest.raises(UnauthenticatedException):
        await privacy_svc.get_privacy_settings(None, "alice")


async def test_get_privacy_settings_rejects_other_user(privacy_svc, alice) -> None:
    with pytest.raises(PermissionDeniedException) as exc_info:
        await privacy_svc.get_privacy_settings(alice, "bob")
    assert exc_info.value.details == {"reason": "identity_mismatch"}


async def test_update_privacy_settings_merges_and_audits(privacy_svc, alice, repos) -> None:
    meta = RequestMetadata(request_id="req-1", ip_address="10.0.0.1", user_agent="EcoMind/1.0")
    result = await privacy_svc.update_privacy_settings(alice, "alice", {"aiProcessing": True}, meta)
    assert result["success"] is True
    assert result["settings"]["aiProcessing"] is True
    assert result["settings"]["dataCollection"] is True
    stored, _ = repos.privacy.docs["alice"]
    assert stored.ai_processing is True
    assert stored.consent_version == "1.0.0"

    [(_, key, entry)] = repos.audit.entries
    assert key.startswith("privacy_update_")
    assert entry["previousSettings"]["aiProcessing"] is False
    assert entry["newSettings"]["aiProcessing"] is True
    assert entry["changedFields"] == ["aiProcessing"]
    assert entry["requestId"] == "req-1"
    assert entry["ipAddress"] == "10.0.0.1"
    assert entry["userAgent"] == "EcoMind/1.0"


async def test_update_privacy_settings_restamps_stale_consent(privacy_svc, alice, repos, make_settings) -> None:
    repos.privacy.seed("alice", make_settings(ai_processing=True, consent_version="0.9.0"))
    await privacy_svc.update_privacy_settings(alice, "alice", {"marketing": False})
    stored, _ = repos.privacy.docs["alice"]
    assert stored.consent_version == "1.0.0"
    assert stored.ai_processing is True


async def test_update_privacy_settings_ignores_unknown_keys(privacy_svc, alice, repos) -> None:
    await privacy_svc.update_privacy_settings(
        alice, "alice", {"analytics": True, "consentVersion": "9.9.9", "admin": True}
    )
    stored, _ = repos.privacy.docs["alice"]
    assert stored.analytics is True
    assert stored.consent_version == "1.0.0"


async def test_update_privacy_settings_rejects_non_boolean(privacy_svc, alice, repos) -> None:
    with pytest.raises(InvalidArgumentException) as exc_info:
        await privacy_svc.update_privacy_settings(alice, "alice", {"aiProcessing": "yes"})
    assert exc_info.value.details == {"field": "aiProcessing"}
    assert repos.audit.entries == []


async def test_update_privacy_settings_retries_lost_race(privacy_svc, alice, repos, make_settings) -> None:
    repos.privacy.seed("alice", make_settings(ai_processing=False))
    repos.privacy.conflicts = MAX_SETTINGS_WRITE_ATTEMPTS - 1
    result = await privacy_svc.update_privacy_settings(alice, "alice", {"aiProcessing": True})
    assert result["success"] is True
    assert repos.privacy.docs["alice"][0].ai_processing is True


async def test_update_privacy_settings_aborts_after_max_attempts(privacy_svc, alice, repos, make_settings) -> None:
    repos.privacy.seed("alice", make_settings(ai_processing=False))
    repos.privacy.conflicts = MAX_SETTINGS_WRITE_ATTEMPTS
    with pytest.raises(AbortedException) as exc_info:
        await privacy_svc.update_privacy_settings(alice, "alice", {"aiProcessing": True})
    assert exc_info.value.error_code == "aborted"
    assert repos.privacy.docs["alice"][0].ai_processing is False
    assert repos.audit.entries == []


async def test_request_data_deletion_records_pending_request(privacy_svc, alice, repos) -> None:
    meta = RequestMetadata(request_id="req-2", ip_address="10.0.0.2", user_agent="ua")
    result = await privacy_svc.request_data_deletion(alice, "alice", None, meta)
    assert result["success"] is True
    assert result["deletionId"].startswith("deletion_alice_")
    assert "30 days" in result["message"]

    request = repos.deletions.requests[result["deletionId"]]
    assert request["status"] == "pending"
    assert request["reason"] == "User requested deletion"
    assert request["userEmail"] == "alice@example.com"
    assert request["ipAddress"] == "10.0.0.2"
    assert request["completedAt"] is None
    assert repos.audit.operations("alice") == ["deletion_request"]


async def test_request_data_deletion_keeps_reason(privacy_svc, alice, repos) -> None:
    result = await privacy_svc.request_data_deletion(alice, "alice", "Moving on")
    assert repos.deletions.requests[result["deletionId"]]["reason"] == "Moving on"


async def test_request_data_deletion_rejects_other_user(privacy_svc) -> None:
    with pytest.raises(PermissionDeniedException):
        await privacy_svc.request_data_deletion(AuthenticatedUser(uid="bob"), "alice")


async def test_export_user_data_json(privacy_svc, alice, repos, make_settings) -> None:
    repos.profiles.profiles["alice"] = {"uid": "alice", "displayName": "Alice"}
    repos.user_data.seed("alice", SUBCOLLECTION_RELATIONSHIPS, "p1", {"name": "Sam", "tags": ["friend"]})
    repos.user_data.seed("alice", SUBCOLLECTION_PROMPTS, "q1", {"text": "Call Sam"})
    repos.user_data.seed("alice", "settings", "privacy", make_settings().to_document())

    result = await privacy_svc.export_user_data(alice, "alice")
    data = result["data"]
    assert data["profile"]["displayName"] == "Alice"
    assert data["relationships"] == [{"id": "p1", "name": "Sam", "tags": ["friend"]}]
    assert data["prompts"] == [{"id": "q1", "text": "Call Sam"}]
    assert isinstance(data["settings"]["privacy"]["lastUpdated"], str)
    assert data["format"] == "json"
    assert "csv" not in data

    [(_, _, entry)] = repos.audit.entries
    assert entry["operation"] == "data_export"
    assert entry["recordCounts"] == {"relationships": 1, "prompts": 1, "settings": 1}


async def test_export_user_data_csv(privacy_svc, alice, repos) -> None:
    repos.user_data.seed("alice", SUBCOLLECTION_RELATIONSHIPS, "p1", {"name": "Sam", "tags": ["friend"]})
    result = await privacy_svc.export_user_data(alice, "alice", "csv")
    csv_text = result["data"]["csv"]["relationships"]
    lines = csv_text.strip().splitlines()
    assert lines[0] == "id,name,tags"
    assert lines[1].startswith("p1,Sam,")


async def test_export_user_data_rejects_unknown_format(privacy_svc, alice) -> None:
    with pytest.raises(InvalidArgumentException):
        await privacy_svc.export_user_data(alice, "alice", "xml")


async def test_operations_succeed_while_audit_store_is_down(privacy_svc, alice, repos) -> None:
    """Audit writes are best effort; the privacy operation itself still completes."""
    repos.audit.fail = True

    updated = await privacy_svc.update_privacy_settings(alice, "alice", {"aiProcessing": True})
    assert updated["success"] is True
    assert updated["settings"]["aiProcessing"] is True
    stored, _ = repos.privacy.docs["alice"]
    assert stored.ai_processing is True

    deletion = await privacy_svc.request_data_deletion(alice, "alice")
    assert deletion["success"] is True
    assert deletion["deletionId"] in repos.deletions.requests

    exported = await privacy_svc.export_user_data(alice, "alice")
    assert exported["success"] is True
    assert exported["data"]["format"] == "json"

    assert repos.audit.entries == []

"""AccountErasureService unit tests: batched erasure, audit trail and the deletion worker."""

import pytest

from ecomind.application.use_cases import AccountErasureService
from ecomind.domain.exceptions import NotFoundException


@pytest.fixture
def erasure_svc(repos, audit_logger) -> AccountErasureService:
    return AccountErasureService(repos.user_data, repos.deletions, audit_logger, batch_limit=3)


def _seed_account(repos) -> None:
    repos.profiles.profiles["alice"] = {"uid": "alice"}
    for i in range(3):
        repos.user_data.seed("alice", "relationships", f"p{i}", {"name": f"P{i}"})
    repos.user_data.seed("alice", "prompts", "q1", {"text": "hi"})
    repos.user_data.seed("alice", "settings", "privacy", {"aiProcessing": True})
    repos.user_data.seed("bob", "relationships", "p9", {"name": "other"})


async def test_erase_account_deletes_everything_in_batches(erasure_svc, repos) -> None:
    _seed_account(repos)
    result = await erasure_svc.erase_account("alice", "alice@example.com")
    assert result["success"] is True
    assert result["recordCounts"]["relationships"] == 3
    assert result["recordCounts"]["prompts"] == 1
    assert result["recordCounts"]["settings"] == 1
    # 5 documents + the profile root, 3 per commit
    assert result["batchCommits"] == 2
    assert len(repos.user_data.deleted) == 6
    assert "alice" not in repos.profiles.profiles
    assert repos.user_data.docs[("bob", "relationships")] == {"p9": {"name": "other"}}

    [(key, entry)] = repos.audit.account_events
    assert key.startswith("user_deletion_alice_")
    assert entry["dataCleanupCompleted"] is True
    assert entry["email"] == "alice@example.com"


async def test_erase_account_failure_is_recorded_not_raised(erasure_svc, repos) -> None:
    _seed_account(repos)
    repos.user_data.fail_deletes = True
    result = await erasure_svc.erase_account("alice")
    assert result == {"success": False, "error": "commit failed"}
    [(key, entry)] = repos.audit.account_events
    assert key.startswith("user_deletion_failed_alice_")
    assert entry["requiresManualCleanup"] is True


async def test_process_deletion_request_completes(erasure_svc, repos) -> None:
    _seed_account(repos)
    repos.deletions.requests["deletion_alice_1"] = {
        "userId": "alice",
        "userEmail": "alice@example.com",
        "status": "pending",
    }
    result = await erasure_svc.process_deletion_request("deletion_alice_1")
    assert result["success"] is True
    assert result["status"] == "completed"
    request = repos.deletions.requests["deletion_alice_1"]
    assert request["status"] == "completed"
    assert request["completedAt"] is not None
    assert "startedAt" in request
    operations = [entry["operation"] for _, entry in repos.audit.account_events]
    assert operations == ["user_deletion", "deletion_request_completed"]


async def test_process_deletion_request_marks_failure(erasure_svc, repos) -> None:
    _seed_account(repos)
    repos.user_data.fail_deletes = True
    repos.deletions.requests["d1"] = {"userId": "alice", "status": "pending"}
    result = await erasure_svc.process_deletion_request("d1")
    assert result["success"] is False
    assert result["status"] == "failed"
    assert repos.deletions.requests["d1"]["errorMessage"] == "commit failed"


async def test_process_deletion_request_is_idempotent_once_completed(erasure_svc, repos) -> None:
    repos.deletions.requests["d1"] = {"userId": "alice", "status": "completed"}
    result = await erasure_svc.process_deletion_request("d1")
    assert result["status"] == "completed"
    assert repos.user_data.deleted == []
    assert repos.audit.account_events == []


async def test_process_deletion_request_missing(erasure_svc) -> None:
    with pytest.raises(NotFoundException):
        await erasure_svc.process_deletion_request("nope")


async def test_erase_account_succeeds_while_audit_store_is_down(erasure_svc, repos) -> None:
    _seed_account(repos)
    repos.audit.fail = True
    result = await erasure_svc.erase_account("alice", "alice@example.com")
    assert result["success"] is True
    assert len(repos.user_data.deleted) == 6
    assert repos.audit.account_events == []

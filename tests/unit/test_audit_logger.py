"""AuditLogger tests: key format, stamping and the swallow-on-failure contract."""

import re

from ecomind.application.services import AuditLogger


async def test_record_writes_stamped_entry(repos) -> None:
    logger = AuditLogger(repos.audit)
    key = await logger.record("alice", "privacy_update", {"changedFields": ["analytics"]})
    assert key is not None
    assert re.match(r"^privacy_update_\d+_\w+$", key)
    [(uid, stored_key, entry)] = repos.audit.entries
    assert uid == "alice"
    assert stored_key == key
    assert entry["operation"] == "privacy_update"
    assert entry["changedFields"] == ["analytics"]
    assert "timestamp" in entry


async def test_record_keys_are_unique_within_a_millisecond(repos) -> None:
    logger = AuditLogger(repos.audit)
    keys = {await logger.record("alice", "ai_operation", {}) for _ in range(20)}
    assert len(keys) == 20


async def test_record_returns_none_when_write_fails(repos) -> None:
    repos.audit.fail = True
    assert await AuditLogger(repos.audit).record("alice", "data_export", {}) is None


async def test_record_account_event_includes_uid(repos) -> None:
    key = await AuditLogger(repos.audit).record_account_event("alice", "user_deletion", {"email": "a@x"})
    assert key is not None and key.startswith("user_deletion_alice_")
    [(stored_key, entry)] = repos.audit.account_events
    assert stored_key == key
    assert entry["uid"] == "alice"
    assert entry["operation"] == "user_deletion"
    assert entry["email"] == "a@x"

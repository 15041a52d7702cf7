"""ConsentGate tests: check_consent outcomes and the audited runner."""

from unittest.mock import AsyncMock

import pytest

from ecomind.application.services import CONSENT_REQUIRED_MESSAGE
from ecomind.domain.exceptions import PermissionDeniedException


async def test_check_consent_true_with_current_ai_consent(gate, repos, make_settings) -> None:
    repos.privacy.seed("alice", make_settings(ai_processing=True))
    assert await gate.check_consent("alice") is True


async def test_check_consent_false_without_settings(gate, repos) -> None:
    assert await gate.check_consent("alice") is False
    assert "alice" not in repos.privacy.docs


async def test_check_consent_false_when_ai_processing_off(gate, repos, make_settings) -> None:
    repos.privacy.seed("alice", make_settings(ai_processing=False))
    assert await gate.check_consent("alice") is False


async def test_check_consent_false_for_stale_version(gate, repos, make_settings) -> None:
    repos.privacy.seed("alice", make_settings(ai_processing=True, consent_version="0.9.0"))
    assert await gate.check_consent("alice") is False


async def test_check_consent_false_when_store_fails(gate, repos) -> None:
    repos.privacy.fail_reads = True
    assert await gate.check_consent("alice") is False


async def test_with_consent_refuses_and_never_runs_operation(gate, repos) -> None:
    operation = AsyncMock(return_value="result")
    runner = gate.with_consent("context_extraction")
    with pytest.raises(PermissionDeniedException) as exc_info:
        await runner("alice", operation)
    assert exc_info.value.message == CONSENT_REQUIRED_MESSAGE
    assert exc_info.value.details == {"reason": "consent_required"}
    operation.assert_not_awaited()
    assert repos.audit.entries == []


async def test_with_consent_audits_then_runs(gate, repos, make_settings) -> None:
    repos.privacy.seed("alice", make_settings())
    operation = AsyncMock(return_value="result")
    result = await gate.with_consent("sentiment_analysis")("alice", operation)
    assert result == "result"
    operation.assert_awaited_once()
    [(uid, key, entry)] = repos.audit.entries
    assert uid == "alice"
    assert key.startswith("ai_operation_")
    assert entry["operation"] == "ai_operation"
    assert entry["dataTypes"] == ["relationship_data", "interaction_notes"]
    assert entry["purposes"] == ["relationship_insights", "ai_suggestions"]
    assert entry["consentVerified"] is True


async def test_with_consent_audit_survives_operation_failure(gate, repos, make_settings) -> None:
    """The audit record is written before the operation, so it exists even when the operation fails."""
    repos.privacy.seed("alice", make_settings())
    operation = AsyncMock(side_effect=RuntimeError("model down"))
    with pytest.raises(RuntimeError):
        await gate.with_consent("insights_generation")("alice", operation)
    assert len(repos.audit.entries) == 1


async def test_with_consent_runs_even_if_audit_write_fails(gate, repos, make_settings) -> None:
    repos.privacy.seed("alice", make_settings())
    repos.audit.fail = True
    operation = AsyncMock(return_value=42)
    assert await gate.with_consent("embedding_generation")("alice", operation) == 42

"""Prompt builder tests: rendering is deterministic and embeds the inputs."""

from ecomind.application.dtos.ai import InteractionInput, RelationshipBundle
from ecomind.application.services.prompt_builder import (
    EXTRACTION_PARAMS,
    INSIGHTS_PARAMS,
    build_extraction_prompt,
    build_insights_prompt,
    build_sentiment_prompt,
    preprocess_embedding_content,
)


def test_extraction_prompt_includes_text_type_and_metadata() -> None:
    prompt = build_extraction_prompt(
        "We caught up over coffee", "conversation", {"location": "cafe", "duration": 30}
    )
    assert "Analyze this conversation" in prompt
    assert '"We caught up over coffee"' in prompt
    assert '"location": "cafe"' in prompt
    assert '"keyPoints"' in prompt


def test_extraction_prompt_defaults() -> None:
    prompt = build_extraction_prompt("hello")
    assert "Analyze this text" in prompt
    assert "METADATA:\nNone" in prompt


def test_extraction_prompt_is_deterministic() -> None:
    meta = {"b": 1, "a": 2}
    assert build_extraction_prompt("x", "note", meta) == build_extraction_prompt("x", "note", dict(meta))


def test_sentiment_prompt_lists_interactions_in_order() -> None:
    prompt = build_sentiment_prompt(
        [
            InteractionInput(id="i1", text="first", timestamp="2025-01-01", type="call"),
            InteractionInput(id="i2", text="second", timestamp="2025-01-02", type="text"),
        ]
    )
    assert prompt.index('1. 2025-01-01 (call):\n"first"') < prompt.index('2. 2025-01-02 (text):\n"second"')
    assert '"individualScores"' in prompt


def test_insights_prompt_quotes_limited_history() -> None:
    bundle = RelationshipBundle(
        relationship={"id": "p1", "name": "Sam"},
        interactions=[{"type": "call", "notes": f"note {i}"} for i in range(8)],
        contexts=[{"summary": f"summary {i}"} for i in range(4)],
        sentiments=[{"overallSentiment": "positive", "sentimentTrend": "stable"} for _ in range(3)],
        analysis_type="health",
    )
    prompt = build_insights_prompt(bundle)
    assert "RECENT INTERACTIONS (8)" in prompt
    assert "note 4" in prompt and "note 5" not in prompt
    assert "summary 2" in prompt and "summary 3" not in prompt
    assert prompt.count("Overall: positive") == 2
    assert "ANALYSIS TYPE: health" in prompt
    assert '"name": "Sam"' in prompt


def test_insights_prompt_uses_placeholder_for_missing_notes() -> None:
    bundle = RelationshipBundle(relationship={"id": "p1"}, interactions=[{"type": "visit"}])
    assert "1. visit: No notes" in build_insights_prompt(bundle)


def test_generation_params() -> None:
    assert EXTRACTION_PARAMS.temperature == 0.3
    assert EXTRACTION_PARAMS.max_output_tokens == 1024
    assert INSIGHTS_PARAMS.temperature == 0.4
    assert INSIGHTS_PARAMS.max_output_tokens == 2048


def test_preprocess_embedding_content_prefix_and_trim() -> None:
    assert preprocess_embedding_content("  loves hiking  ", "life_event") == "Life event: loves hiking"
    assert preprocess_embedding_content("calm", "emotional_signal") == "Emotional context: calm"
    assert preprocess_embedding_content(" plain ") == "plain"
    assert preprocess_embedding_content("x", "unknown_type") == "x"


def test_preprocess_embedding_content_truncates_after_prefix() -> None:
    processed = preprocess_embedding_content("a" * 3000, "relationship_context", max_length=2000)
    assert len(processed) == 2000
    assert processed.startswith("Relationship context: ")

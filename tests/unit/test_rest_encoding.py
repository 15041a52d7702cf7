"""Firestore REST value encoding tests."""

from datetime import datetime, timedelta, timezone

import pytest

from ecomind.infrastructure.firebase._rest_encoding import (
    _encode_value,
    decode_fields,
    encode_document,
    nest_field_paths,
    parse_timestamp,
)


def test_encode_scalars() -> None:
    assert _encode_value(None) == {"nullValue": None}
    assert _encode_value(True) == {"booleanValue": True}
    assert _encode_value(7) == {"integerValue": "7"}
    assert _encode_value(0.5) == {"doubleValue": 0.5}
    assert _encode_value("x") == {"stringValue": "x"}


def test_encode_datetime_as_utc_timestamp() -> None:
    local = datetime(2025, 1, 15, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    assert _encode_value(local) == {"timestampValue": "2025-01-15T12:00:00.000000Z"}


def test_encode_nested_document() -> None:
    doc = encode_document({"tags": ["a", 1], "prefs": {"theme": "dark"}})
    assert doc == {
        "fields": {
            "tags": {"arrayValue": {"values": [{"stringValue": "a"}, {"integerValue": "1"}]}},
            "prefs": {"mapValue": {"fields": {"theme": {"stringValue": "dark"}}}},
        }
    }


def test_encode_unsupported_type() -> None:
    with pytest.raises(TypeError):
        _encode_value(object())


def test_decode_fields() -> None:
    decoded = decode_fields(
        {
            "count": {"integerValue": "3"},
            "empty": {"arrayValue": {}},
            "when": {"timestampValue": "2025-01-15T12:00:00Z"},
            "nested": {"mapValue": {"fields": {"ok": {"booleanValue": False}}}},
        }
    )
    assert decoded == {
        "count": 3,
        "empty": [],
        "when": datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc),
        "nested": {"ok": False},
    }
    assert decode_fields(None) == {}


def test_parse_timestamp_truncates_nanoseconds() -> None:
    parsed = parse_timestamp("2025-01-15T12:00:00.123456789Z")
    assert parsed == datetime(2025, 1, 15, 12, 0, 0, 123456, tzinfo=timezone.utc)


def test_nest_field_paths() -> None:
    assert nest_field_paths({"stats.lastActiveAt": 1, "stats.total": 2, "name": "x"}) == {
        "stats": {"lastActiveAt": 1, "total": 2},
        "name": "x",
    }

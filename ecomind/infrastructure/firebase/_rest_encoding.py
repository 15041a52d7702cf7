"""Encode/decode Python values to/from Firestore REST API 'fields' format."""

import base64
import re
from datetime import datetime
from typing import Any

from ecomind.shared.utils.datetime import ensure_utc

# Firestore returns up to nanosecond precision; datetime keeps microseconds.
_FRACTION = re.compile(r"\.(\d{6})\d+")


def _encode_value(v: Any) -> dict:
    if v is None:
        return {"nullValue": None}
    if isinstance(v, bool):
        return {"booleanValue": v}
    if isinstance(v, int):
        return {"integerValue": str(v)}
    if isinstance(v, float):
        return {"doubleValue": v}
    if isinstance(v, datetime):
        return {"timestampValue": ensure_utc(v).strftime("%Y-%m-%dT%H:%M:%S.%fZ")}
    if isinstance(v, str):
        return {"stringValue": v}
    if isinstance(v, bytes):
        return {"bytesValue": base64.standard_b64encode(v).decode("ascii")}
    if isinstance(v, (list, tuple)):
        return {"arrayValue": {"values": [_encode_value(x) for x in v]}}
    if isinstance(v, dict):
        return {"mapValue": {"fields": {k: _encode_value(x) for k, x in v.items()}}}
    raise TypeError(f"Unsupported Firestore value type: {type(v)}")


def encode_document(data: dict[str, Any]) -> dict:
    """Convert a Python dict to Firestore REST Document.fields format."""
    return {"fields": {k: _encode_value(v) for k, v in data.items()}}


def parse_timestamp(raw: str) -> datetime:
    """Parse a Firestore RFC 3339 timestamp into an aware datetime."""
    return datetime.fromisoformat(_FRACTION.sub(r".\1", raw).replace("Z", "+00:00"))


def _decode_value(obj: dict) -> Any:
    if "nullValue" in obj:
        return None
    if "booleanValue" in obj:
        return obj["booleanValue"]
    if "integerValue" in obj:
        return int(obj["integerValue"])
    if "doubleValue" in obj:
        return float(obj["doubleValue"])
    if "timestampValue" in obj:
        return parse_timestamp(obj["timestampValue"])
    if "stringValue" in obj:
        return obj["stringValue"]
    if "bytesValue" in obj:
        return base64.standard_b64decode(obj["bytesValue"])
    if "arrayValue" in obj:
        vals = obj.get("arrayValue", {}).get("values") or []
        return [_decode_value(x) for x in vals]
    if "mapValue" in obj:
        fields = obj["mapValue"].get("fields") or {}
        return {k: _decode_value(x) for k, x in fields.items()}
    return None


def decode_fields(fields: dict | None) -> dict:
    """Convert a Firestore REST ``fields`` map to a Python dict."""
    if not fields:
        return {}
    return {k: _decode_value(v) for k, v in fields.items()}


def nest_field_paths(data: dict[str, Any]) -> dict[str, Any]:
    """Expand dotted field paths into nested maps.

    ``{"stats.lastActiveAt": t, "name": "x"}`` -> ``{"stats": {"lastActiveAt": t}, "name": "x"}``.
    Used for partial updates, where the update mask names the dotted paths.
    """
    nested: dict[str, Any] = {}
    for path, value in data.items():
        parts = path.split(".")
        cursor = nested
        for part in parts[:-1]:
            cursor = cursor.setdefault(part, {})
        cursor[parts[-1]] = value
    return nested

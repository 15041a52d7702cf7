"""Derive request metadata for audit records from a Starlette Request."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass

from starlette.requests import Request

# Safe for logging: alphanumeric, hyphen, underscore; bounded length.
REQUEST_ID_MAX_LENGTH = 64
REQUEST_ID_ALLOWED_PATTERN = re.compile(
    r"^[a-zA-Z0-9_-]{1," + str(REQUEST_ID_MAX_LENGTH) + r"}$"
)


@dataclass(frozen=True)
class RequestMetadata:
    """Actor metadata attached to audit records (IP/user agent when available)."""

    request_id: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None

    def to_audit_fields(self) -> dict[str, str | None]:
        return {
            "requestId": self.request_id,
            "ipAddress": self.ip_address,
            "userAgent": self.user_agent,
        }


def sanitize_request_id(raw: str | None) -> str:
    """Return raw if valid and safe; otherwise a new UUID. Prevents log injection."""
    if not raw or not REQUEST_ID_ALLOWED_PATTERN.match(raw.strip()):
        return str(uuid.uuid4())
    return raw.strip()[:REQUEST_ID_MAX_LENGTH]


def get_request_metadata(request: Request, request_id_header: str = "X-Request-ID") -> RequestMetadata:
    """Return request id, client IP and user agent for audit entries.

    IP comes from X-Forwarded-For (first hop) or request.client.host.
    """
    client_host = request.client.host if request.client else None
    forwarded = request.headers.get("X-Forwarded-For")
    ip_address = (
        (forwarded.split(",")[0].strip() if forwarded else None) or client_host
    )
    return RequestMetadata(
        request_id=getattr(request.state, "request_id", None)
        or sanitize_request_id(request.headers.get(request_id_header)),
        ip_address=ip_address,
        user_agent=request.headers.get("User-Agent"),
    )

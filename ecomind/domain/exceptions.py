"""Domain exceptions for the EcoMind backend.

Every public operation fails with one of these. Each carries a machine-readable
``error_code`` (the callable-function error kind, e.g. ``permission-denied``)
and a human-readable message. The presentation layer maps them to HTTP
responses in exception handlers; nothing else leaks to the caller.
"""

from typing import Any


class EcoMindException(Exception):
    """Base exception for all EcoMind application errors.

    Attributes:
        message: Human-readable error description (safe to show to the caller).
        error_code: Machine-readable error kind.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the structured error body sent to callers."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class UnauthenticatedException(EcoMindException):
    """Raised when no (valid) identity is attached to the request."""

    def __init__(self, message: str = "User must be authenticated") -> None:
        super().__init__(message, "unauthenticated")


class PermissionDeniedException(EcoMindException):
    """Raised when the identity may not act on the target resource, or consent is missing."""

    def __init__(
        self,
        message: str = "Unauthorized",
        reason: str | None = None,
    ) -> None:
        """Initialize with message and optional machine-readable reason.

        Args:
            message: Human-readable message (remediation hint where applicable).
            reason: Optional reason tag (e.g. 'identity_mismatch', 'consent_required').
        """
        details = {"reason": reason} if reason else {}
        super().__init__(message, "permission-denied", details)


class InvalidArgumentException(EcoMindException):
    """Raised when caller input is malformed or empty."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "invalid-argument", details)


class NotFoundException(EcoMindException):
    """Raised when a referenced profile or resource does not exist."""

    def __init__(self, resource_type: str, resource_id: str, message: str | None = None) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'profile', 'relationship').
            resource_id: The ID that was not found.
            message: Optional override for the default message.
        """
        super().__init__(
            message or f"{resource_type} not found: {resource_id}",
            "not-found",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class FailedPreconditionException(EcoMindException):
    """Raised when required external configuration (AI credentials, data store) is absent."""

    def __init__(self, message: str = "AI service is not configured") -> None:
        super().__init__(message, "failed-precondition")


class AbortedException(EcoMindException):
    """Raised when a compare-and-swap write kept losing to concurrent writers."""

    def __init__(self, resource_type: str, resource_id: str, attempts: int) -> None:
        super().__init__(
            f"{resource_type} was updated concurrently; retry.",
            "aborted",
            {"resource_type": resource_type, "resource_id": resource_id, "attempts": attempts},
        )


class InternalException(EcoMindException):
    """Raised for unexpected failures, including data store and AI provider errors."""

    def __init__(self, message: str = "Internal error", operation: str | None = None) -> None:
        details = {"operation": operation} if operation else {}
        super().__init__(message, "internal", details)

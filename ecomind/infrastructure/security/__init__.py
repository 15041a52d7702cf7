"""Identity verification."""

from ecomind.infrastructure.security.firebase_auth import FirebaseTokenVerifier

__all__ = ["FirebaseTokenVerifier"]

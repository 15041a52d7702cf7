"""Firebase ID token verification (google-auth).

Tokens are verified against Google's public certificates with the Firebase
project id as audience. Verification fetches certificates over HTTP, so it
runs in a worker thread.
"""

from __future__ import annotations

import asyncio
from typing import Any

import google.auth.transport.requests
from google.oauth2 import id_token

from ecomind.application.dtos.user import AuthenticatedUser


def _verify_sync(token: str, project_id: str) -> dict[str, Any]:
    request = google.auth.transport.requests.Request()
    return id_token.verify_firebase_token(token, request, audience=project_id)


class FirebaseTokenVerifier:
    """Implements IIdentityVerifier for Firebase Authentication ID tokens."""

    def __init__(self, project_id: str) -> None:
        self._project_id = project_id

    async def verify(self, token: str) -> AuthenticatedUser:
        """Return the caller identity.

        Raises:
            ValueError: If the token is malformed, expired, for another
                project, or has no subject.
        """
        if not token:
            raise ValueError("Missing token")
        try:
            claims = await asyncio.to_thread(_verify_sync, token, self._project_id)
        except ValueError:
            raise
        except Exception as e:
            raise ValueError(f"Token verification failed: {type(e).__name__}") from e
        if not claims:
            raise ValueError("Token verification returned no claims")
        uid = claims.get("user_id") or claims.get("sub")
        if not uid:
            raise ValueError("Token has no subject")
        return AuthenticatedUser(uid=str(uid), email=claims.get("email"), claims=dict(claims))

"""Firestore client factory (REST-based, no firebase-admin).

Built once by the application lifespan from either FIREBASE_SERVICE_ACCOUNT_KEY
(JSON string) or FIREBASE_SERVICE_ACCOUNT_PATH (file path) and stored on
app.state; handlers receive it through dependency injection.
"""

import json
import logging
from pathlib import Path

from ecomind.core.config import Settings
from ecomind.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    _get_credentials,
)

logger = logging.getLogger(__name__)


def load_service_account(settings: Settings) -> dict | None:
    """Return service account dict from env key or file path (None when neither is set)."""
    key_json = settings.firebase_service_account_key.get_secret_value() if settings.firebase_service_account_key else None
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    path = settings.firebase_service_account_path
    if path:
        resolved = Path(path).expanduser().resolve()
        if not resolved.is_file():
            logger.warning(
                "FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: %s (resolved: %s)",
                path,
                resolved,
            )
            return None
        with open(resolved, encoding="utf-8") as f:
            return json.load(f)
    return None


def create_firestore_client(settings: Settings) -> FirestoreRESTClient | None:
    """Build the Firestore client (REST API + google-auth).

    Returns None when no credentials are configured. On malformed credentials
    or any initialization error, logs the exception and returns None so the
    app can still start (data-store operations then fail with failed-precondition).
    """
    try:
        key_dict = load_service_account(settings)
        if not key_dict:
            return None

        project_id = key_dict.get("project_id")
        if not project_id:
            logger.error("Firebase service account JSON missing 'project_id'")
            return None

        cred = _get_credentials(key_dict)
        return FirestoreRESTClient(project_id, cred)
    except Exception:
        logger.exception("Firebase initialization failed")
        return None

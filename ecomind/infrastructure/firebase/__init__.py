"""Firestore integration over the REST API (google-auth + httpx)."""

from ecomind.infrastructure.firebase._rest_client import FirestoreRESTClient
from ecomind.infrastructure.firebase.client import create_firestore_client

__all__ = [
    "FirestoreRESTClient",
    "create_firestore_client",
]

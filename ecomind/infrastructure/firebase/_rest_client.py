"""Thin Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
All HTTP calls use httpx.AsyncClient so they do not block the event loop.
The surface mirrors the firebase-admin API for the operations we use:
document get/set/update, batched deletes, subcollections, collection add/stream,
ordered/limited queries, and batched commits.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import quote

import httpx

from ecomind.infrastructure.firebase._rest_encoding import (
    _encode_value,
    decode_fields,
    encode_document,
    nest_field_paths,
)

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"
_LIST_PAGE_SIZE = 300


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


class DocumentExistsError(Exception):
    """Raised when a create (or exists=false precondition) hits an existing document (409)."""


class PreconditionFailedError(Exception):
    """Raised when an updateTime precondition no longer matches (400 FAILED_PRECONDITION)."""


class DocumentNotFoundError(Exception):
    """Raised when update() targets a document that does not exist."""


def _error_status(resp: httpx.Response) -> str | None:
    """Return the google.rpc status string (e.g. FAILED_PRECONDITION) from an error body."""
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, list):
        body = body[0] if body else {}
    return (body.get("error") or {}).get("status") if isinstance(body, dict) else None


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    method: str = "GET",
    body: dict | None = None,
    access_token: str | None = None,
    params: dict[str, str] | None = None,
) -> Any:
    """Perform async HTTP request to Firestore REST API. 404 returns None."""
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    if method == "GET":
        resp = await client.get(url, headers=headers, params=params)
    elif method == "PATCH":
        resp = await client.patch(url, headers=headers, json=body, params=params)
    elif method == "POST":
        resp = await client.post(url, headers=headers, json=body, params=params)
    else:
        raise ValueError(f"Unsupported method: {method!r}")
    if resp.status_code == 404:
        return None
    if resp.status_code == 409:
        raise DocumentExistsError("Document already exists")
    if resp.status_code == 400 and _error_status(resp) == "FAILED_PRECONDITION":
        raise PreconditionFailedError("Document precondition failed")
    if resp.status_code not in (200, 204):
        resp.raise_for_status()
    raw = resp.content
    return json.loads(raw.decode()) if raw else {}


class Increment:
    """Sentinel for an atomic numeric increment in update() (FieldValue.increment)."""

    def __init__(self, amount: int | float) -> None:
        self.amount = amount

    def __repr__(self) -> str:
        return f"Increment({self.amount!r})"


def _update_write(name: str, data: dict[str, Any]) -> dict[str, Any]:
    """Build a commit write for a partial update (dotted paths + increments)."""
    plain = {k: v for k, v in data.items() if not isinstance(v, Increment)}
    transforms = [
        {"fieldPath": k, "increment": _encode_value(v.amount)}
        for k, v in data.items()
        if isinstance(v, Increment)
    ]
    write: dict[str, Any] = {
        "update": {"name": name, **encode_document(nest_field_paths(plain))},
        "updateMask": {"fieldPaths": list(plain.keys())},
        "currentDocument": {"exists": True},
    }
    if transforms:
        write["updateTransforms"] = transforms
    return write


class DocumentSnapshot:
    """Snapshot of a document (id + data + server update time)."""

    def __init__(self, id_: str, data: dict, update_time: str | None = None):
        self.id = id_
        self._data = data
        self.update_time = update_time

    def to_dict(self) -> dict:
        return self._data


def _snapshot_from_doc(doc: dict) -> DocumentSnapshot:
    name = doc.get("name", "")
    doc_id = name.split("/")[-1] if name else ""
    return DocumentSnapshot(doc_id, decode_fields(doc.get("fields")), doc.get("updateTime"))


class DocumentReference:
    """Reference to a single document; matches firestore API style."""

    def __init__(self, client: "FirestoreRESTClient", path: str):
        self._client = client
        self._path = path

    @property
    def id(self) -> str:
        return self._path.split("/")[-1]

    @property
    def path(self) -> str:
        """Full resource name (projects/.../documents/...)."""
        return self._path

    def collection(self, collection_id: str) -> "CollectionReference":
        """Return a subcollection of this document."""
        return CollectionReference(self._client, f"{self._path}/{collection_id}")

    async def set(
        self,
        data: dict[str, Any],
        *,
        exists: bool | None = None,
        update_time: str | None = None,
    ) -> str | None:
        """Create or overwrite the document (PATCH with full replace); return its updateTime.

        Optional preconditions: ``exists=False`` (only create) or ``update_time``
        (only overwrite the exact version read earlier). A violated precondition
        raises DocumentExistsError or PreconditionFailedError.
        """
        params: dict[str, str] = {}
        if update_time is not None:
            params["currentDocument.updateTime"] = update_time
        elif exists is not None:
            params["currentDocument.exists"] = "true" if exists else "false"
        out = await _request_async(
            self._client._http,
            f"{_BASE}/{self._path}",
            method="PATCH",
            body=encode_document(data),
            access_token=await self._client.get_token(),
            params=params or None,
        )
        if out is None and (exists or update_time is not None):
            raise PreconditionFailedError("Document no longer exists")
        return (out or {}).get("updateTime")

    async def update(self, data: dict[str, Any]) -> None:
        """Merge fields into an existing document.

        Keys may be dotted paths ("stats.lastActiveAt"); values may be
        Increment(n). Raises DocumentNotFoundError if the document is missing.
        """
        out = await self._client._commit([_update_write(self._path, data)])
        if out is None:
            raise DocumentNotFoundError(self._path)

    async def get(self) -> DocumentSnapshot | None:
        """Fetch the document; returns None if not found."""
        out = await _request_async(
            self._client._http,
            f"{_BASE}/{self._path}",
            access_token=await self._client.get_token(),
        )
        if not out:
            return None
        return DocumentSnapshot(
            self.id, decode_fields(out.get("fields")), out.get("updateTime")
        )


_DIRECTIONS = {"asc": "ASCENDING", "desc": "DESCENDING"}


class _Query:
    """Fluent query builder for a collection; runs via runQuery (order/limit on server)."""

    def __init__(self, client: "FirestoreRESTClient", parent: str, collection_id: str):
        self._client = client
        self._parent = parent
        self._collection_id = collection_id
        self._order_by_field: str | None = None
        self._order_direction: str = "ASCENDING"
        self._limit: int | None = None

    def order_by(self, field: str, direction: str = "ASCENDING") -> "_Query":
        self._order_by_field = field
        self._order_direction = _DIRECTIONS.get(direction.lower(), direction.upper())
        return self

    def limit(self, n: int) -> "_Query":
        self._limit = n
        return self

    def _structured_query(self) -> dict[str, Any]:
        structured: dict[str, Any] = {
            "from": [{"collectionId": self._collection_id}],
        }
        if self._order_by_field is not None:
            structured["orderBy"] = [
                {
                    "field": {"fieldPath": self._order_by_field},
                    "direction": self._order_direction,
                }
            ]
        if self._limit:
            structured["limit"] = self._limit
        return structured

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """Execute the query and yield document snapshots."""
        resp = await _request_async(
            self._client._http,
            f"{_BASE}/{self._parent}:runQuery",
            method="POST",
            body={"structuredQuery": self._structured_query()},
            access_token=await self._client.get_token(),
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        for item in items:
            if "document" not in item:
                continue
            yield _snapshot_from_doc(item["document"])


class CollectionReference:
    """Reference to a collection (top-level or subcollection); matches firestore API style."""

    def __init__(self, client: "FirestoreRESTClient", path: str):
        self._client = client
        self._path = path.rstrip("/")

    @property
    def id(self) -> str:
        return self._path.split("/")[-1]

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, f"{self._path}/{document_id}")

    async def create(self, document_id: str, data: dict[str, Any]) -> None:
        """Create a document with the given ID (fail with DocumentExistsError if it exists)."""
        url = f"{_BASE}/{self._path}?documentId={quote(document_id, safe='')}"
        await _request_async(
            self._client._http,
            url,
            method="POST",
            body=encode_document(data),
            access_token=await self._client.get_token(),
        )

    async def add(self, data: dict[str, Any]) -> str:
        """Create a document with a server-assigned ID and return that ID."""
        out = await _request_async(
            self._client._http,
            f"{_BASE}/{self._path}",
            method="POST",
            body=encode_document(data),
            access_token=await self._client.get_token(),
        )
        name = (out or {}).get("name", "")
        return name.split("/")[-1]

    def order_by(self, field: str, direction: str = "ASCENDING") -> _Query:
        """Start an ordered query. Use .limit(), then .stream()."""
        parent = self._path.rsplit("/", 1)[0]
        return _Query(self._client, parent, self.id).order_by(field, direction)

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """List every document in the collection (shallow), following page tokens."""
        page_token: str | None = None
        while True:
            params = {"pageSize": str(_LIST_PAGE_SIZE)}
            if page_token:
                params["pageToken"] = page_token
            out = await _request_async(
                self._client._http,
                f"{_BASE}/{self._path}",
                access_token=await self._client.get_token(),
                params=params,
            )
            if not out:
                return
            for doc in out.get("documents", []):
                yield _snapshot_from_doc(doc)
            page_token = out.get("nextPageToken")
            if not page_token:
                return


class WriteBatch:
    """Accumulates writes and applies them atomically in one commit."""

    def __init__(self, client: "FirestoreRESTClient") -> None:
        self._client = client
        self._writes: list[dict[str, Any]] = []

    def delete(self, ref: DocumentReference) -> None:
        self._writes.append({"delete": ref.path})

    async def commit(self) -> None:
        """Apply all queued writes. An empty batch is a no-op."""
        if not self._writes:
            return
        out = await self._client._commit(self._writes)
        if out is None:
            raise DocumentNotFoundError("Batch commit targeted a missing document")
        self._writes = []


class FirestoreRESTClient:
    """Lightweight Firestore client using REST API (no firebase-admin)."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._database = f"projects/{project_id}/databases/(default)"
        self._prefix = f"{self._database}/documents"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=30.0)
        self._owns_http = http_client is None

    @property
    def project_id(self) -> str:
        return self._project_id

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str:
        """Return a valid access token; refreshes in thread pool to avoid blocking."""
        return await asyncio.to_thread(_get_access_token, self._credentials)

    def collection(self, collection_id: str) -> CollectionReference:
        return CollectionReference(self, f"{self._prefix}/{collection_id}")

    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    async def _commit(self, writes: list[dict[str, Any]]) -> dict | None:
        return await _request_async(
            self._http,
            f"{_BASE}/{self._prefix}:commit",
            method="POST",
            body={"writes": writes},
            access_token=await self.get_token(),
        )

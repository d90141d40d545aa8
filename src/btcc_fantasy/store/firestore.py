"""Document store backed by the hosted document database's REST API."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import httpx

from btcc_fantasy._logging import log_store_call
from btcc_fantasy.config import EngineSettings, get_settings
from btcc_fantasy.constants import DEFAULT_MAX_BATCH_WRITES
from btcc_fantasy.exceptions import (
    BatchTooLargeError,
    StoreAPIError,
    StoreConnectionError,
    StoreError,
    StoreTimeoutError,
    StoreTransportError,
)
from btcc_fantasy.store._codec import decode_fields, encode_fields, encode_value
from btcc_fantasy.store.base import DeleteWrite, Document, DocumentStore, SetWrite, Write

DEFAULT_BASE_URL = "https://firestore.googleapis.com/v1"
DEFAULT_TIMEOUT = 30.0
PAGE_SIZE = 300


def _handle_response(response: httpx.Response) -> Any:
    """Validate response status and return parsed JSON."""
    if response.status_code >= 400:
        raise StoreAPIError(
            status_code=response.status_code,
            message=response.text,
        )
    try:
        return response.json()
    except ValueError as exc:
        raise StoreAPIError(
            status_code=response.status_code,
            message=f"Response is not valid JSON: {exc}",
        ) from exc


def _doc_id(name: str) -> str:
    return name.rsplit("/", 1)[-1]


class FirestoreRestStore(DocumentStore):
    """Synchronous REST store using httpx.Client.

    Usage:
        with FirestoreRestStore(project="btcc-fantasy", token=token) as store:
            EventScoreWriter(store).score_event("2026", "event-01")
    """

    max_batch_size = DEFAULT_MAX_BATCH_WRITES

    def __init__(
        self,
        project: str,
        database: str = "(default)",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        token: str | None = None,
    ) -> None:
        self._root = f"projects/{project}/databases/{database}/documents"
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=f"{base_url.rstrip('/')}/projects/{project}/databases/{database}",
            timeout=timeout,
            headers=headers,
        )

    @classmethod
    def from_settings(cls, settings: EngineSettings | None = None) -> FirestoreRestStore:
        settings = settings or get_settings()
        if not settings.firestore_project:
            raise StoreError("BTCC_FIRESTORE_PROJECT is not configured")
        return cls(
            project=settings.firestore_project,
            database=settings.firestore_database,
            base_url=settings.firestore_base_url,
            timeout=settings.firestore_timeout,
            token=settings.firestore_token,
        )

    def __enter__(self) -> FirestoreRestStore:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection."""
        self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.ConnectError as exc:
            raise StoreConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise StoreTimeoutError(str(exc)) from exc
        except httpx.TransportError as exc:
            raise StoreTransportError(f"{type(exc).__name__}: {exc}") from exc

    def _name(self, collection: str, doc_id: str) -> str:
        return f"{self._root}/{collection}/{doc_id}"

    # ── Reads ──────────────────────────────────────────────────

    @log_store_call
    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        response = self._request("GET", f"/documents/{collection}/{doc_id}")
        if response.status_code == 404:
            return None
        body = _handle_response(response)
        return decode_fields(body.get("fields", {}))

    @log_store_call
    def list_documents(self, collection: str) -> list[Document]:
        documents: list[Document] = []
        page_token: str | None = None
        while True:
            params: list[tuple[str, str]] = [("pageSize", str(PAGE_SIZE))]
            if page_token:
                params.append(("pageToken", page_token))
            body = _handle_response(
                self._request("GET", f"/documents/{collection}", params=params),
            )
            for doc in body.get("documents", []):
                documents.append(
                    Document(id=_doc_id(doc["name"]), data=decode_fields(doc.get("fields", {}))),
                )
            page_token = body.get("nextPageToken")
            if not page_token:
                return documents

    @log_store_call
    def query_ordered(
        self, collection: str, field: str, *, lte: int | float | None = None,
    ) -> list[Document]:
        parent, _, collection_id = collection.rpartition("/")
        path = f"/documents/{parent}:runQuery" if parent else "/documents:runQuery"

        query: dict[str, Any] = {
            "from": [{"collectionId": collection_id}],
            "orderBy": [{"field": {"fieldPath": field}, "direction": "ASCENDING"}],
        }
        if lte is not None:
            query["where"] = {
                "fieldFilter": {
                    "field": {"fieldPath": field},
                    "op": "LESS_THAN_OR_EQUAL",
                    "value": encode_value(lte),
                },
            }

        rows = _handle_response(self._request("POST", path, json={"structuredQuery": query}))
        return [
            Document(id=_doc_id(row["document"]["name"]), data=decode_fields(row["document"].get("fields", {})))
            for row in rows
            if "document" in row
        ]

    # ── Writes ─────────────────────────────────────────────────

    def _encode_write(self, write: Write) -> dict[str, Any]:
        if isinstance(write, SetWrite):
            # No updateMask: the stored document is replaced, not merged
            return {
                "update": {
                    "name": self._name(write.collection, write.doc_id),
                    "fields": encode_fields(write.data),
                },
            }
        if isinstance(write, DeleteWrite):
            return {"delete": self._name(write.collection, write.doc_id)}
        raise StoreError(f"Unsupported write: {write!r}")

    @log_store_call
    def commit(self, writes: Sequence[Write]) -> None:
        if len(writes) > self.max_batch_size:
            raise BatchTooLargeError(len(writes), self.max_batch_size)
        if not writes:
            return
        body = {"writes": [self._encode_write(w) for w in writes]}
        _handle_response(self._request("POST", "/documents:commit", json=body))

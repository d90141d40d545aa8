"""In-process document store."""

from __future__ import annotations

import copy
import threading
from collections.abc import Sequence
from typing import Any

from btcc_fantasy._logging import log_store_call
from btcc_fantasy.constants import DEFAULT_MAX_BATCH_WRITES
from btcc_fantasy.exceptions import BatchTooLargeError, StoreError
from btcc_fantasy.store.base import DeleteWrite, Document, DocumentStore, SetWrite, Write


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed store. Reads and writes copy documents so callers never share state."""

    def __init__(self, max_batch_size: int = DEFAULT_MAX_BATCH_WRITES) -> None:
        self.max_batch_size = max_batch_size
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = threading.Lock()
        self.commit_count = 0

    def put(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Write one document outside any batch (seeding and fixtures)."""
        with self._lock:
            self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    @log_store_call
    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        with self._lock:
            data = self._collections.get(collection, {}).get(doc_id)
            return copy.deepcopy(data) if data is not None else None

    @log_store_call
    def list_documents(self, collection: str) -> list[Document]:
        with self._lock:
            docs = self._collections.get(collection, {})
            return [
                Document(id=doc_id, data=copy.deepcopy(data))
                for doc_id, data in sorted(docs.items())
            ]

    @log_store_call
    def query_ordered(
        self, collection: str, field: str, *, lte: int | float | None = None,
    ) -> list[Document]:
        with self._lock:
            docs = self._collections.get(collection, {})
            matches = [
                (data[field], doc_id, data)
                for doc_id, data in docs.items()
                if _is_number(data.get(field)) and (lte is None or data[field] <= lte)
            ]
            matches.sort(key=lambda m: (m[0], m[1]))
            return [Document(id=doc_id, data=copy.deepcopy(data)) for _, doc_id, data in matches]

    @log_store_call
    def commit(self, writes: Sequence[Write]) -> None:
        if len(writes) > self.max_batch_size:
            raise BatchTooLargeError(len(writes), self.max_batch_size)
        for write in writes:
            if not isinstance(write, (SetWrite, DeleteWrite)):
                raise StoreError(f"Unsupported write: {write!r}")

        with self._lock:
            for write in writes:
                docs = self._collections.setdefault(write.collection, {})
                if isinstance(write, SetWrite):
                    docs[write.doc_id] = copy.deepcopy(write.data)
                else:
                    docs.pop(write.doc_id, None)
            self.commit_count += 1

"""Abstract document store the engine reads from and writes to."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from btcc_fantasy.constants import DEFAULT_MAX_BATCH_WRITES


@dataclass(frozen=True)
class Document:
    id: str
    data: dict[str, Any]


@dataclass(frozen=True)
class SetWrite:
    """Create or fully replace a document. Fields not in *data* are dropped."""

    collection: str
    doc_id: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DeleteWrite:
    collection: str
    doc_id: str


Write = SetWrite | DeleteWrite


class DocumentStore(ABC):
    """Collections of documents addressed by slash-separated paths.

    ``commit`` is atomic: either every write in the batch is applied or none
    is. A batch may hold at most ``max_batch_size`` writes.
    """

    max_batch_size: int = DEFAULT_MAX_BATCH_WRITES

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None: ...

    @abstractmethod
    def list_documents(self, collection: str) -> list[Document]: ...

    @abstractmethod
    def query_ordered(
        self, collection: str, field: str, *, lte: int | float | None = None,
    ) -> list[Document]:
        """Return documents ordered ascending by a numeric *field*.

        Documents without the field are skipped. With *lte*, only documents
        whose field is less than or equal to it are returned.
        """

    @abstractmethod
    def commit(self, writes: Sequence[Write]) -> None: ...

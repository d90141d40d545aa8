"""Document store interface and implementations."""

from btcc_fantasy.store.base import DeleteWrite, Document, DocumentStore, SetWrite, Write
from btcc_fantasy.store.firestore import FirestoreRestStore
from btcc_fantasy.store.memory import InMemoryDocumentStore

__all__ = [
    "DeleteWrite",
    "Document",
    "DocumentStore",
    "FirestoreRestStore",
    "InMemoryDocumentStore",
    "SetWrite",
    "Write",
]

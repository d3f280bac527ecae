"""Append-only document store with a parallel index store.

Documents and their indexes live in two insertion-ordered lists that always
have the same length. Appends happen under a lock; readers take a snapshot
(a length prefix captured at call start) and never block writers.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import threading

from vector_search.domain.documents import Document
from vector_search.search.models import Index


@dataclass(frozen=True)
class StoreSnapshot:
    """Fixed-length view of the store captured at a point in time."""

    documents: tuple[Document, ...]
    indexes: tuple[Index, ...]

    def __len__(self) -> int:
        return len(self.documents)


class DocumentStore:
    """Insertion-ordered documents paired position-for-position with their indexes."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._documents: list[Document] = []
        self._indexes: list[Index] = []

    def append(self, document: Document, index_fn: Callable[[Document], Index]) -> int:
        """Index ``document`` and append both entries; return the new position.

        The index is built before anything is stored, so a failure leaves the
        store unchanged.
        """

        index = index_fn(document)
        with self._lock:
            self._documents.append(document)
            self._indexes.append(index)
            return len(self._documents) - 1

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(tuple(self._documents), tuple(self._indexes))

    def documents(self) -> tuple[Document, ...]:
        with self._lock:
            return tuple(self._documents)

    def __getitem__(self, position: int) -> Document:
        with self._lock:
            return self._documents[position]

    def __len__(self) -> int:
        with self._lock:
            return len(self._documents)

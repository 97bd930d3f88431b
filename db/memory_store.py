"""
db/memory_store.py
------------------
Process-local document store. Used for local runs without PostgreSQL
(STORE_BACKEND=memory) and by the test suite.

Documents are deep-copied on the way in and out so callers never share
mutable state with the store.
"""

import copy
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from db.store import Document, DocumentStore


class MemoryDocumentStore(DocumentStore):
    """Dict-of-dicts implementation of DocumentStore."""

    def __init__(self):
        self._collections: dict[str, dict[str, Document]] = {}
        self._lock = threading.RLock()
        self._depth = 0
        self._snapshot: Optional[dict[str, dict[str, Document]]] = None

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            outermost = self._depth == 0
            if outermost:
                self._snapshot = copy.deepcopy(self._collections)
            self._depth += 1
            try:
                yield
            except Exception:
                if outermost:
                    self._collections = self._snapshot
                raise
            finally:
                self._depth -= 1
                if outermost:
                    self._snapshot = None

    def lock(self, *parts: str) -> None:
        # Transactions already serialize on the store-wide lock.
        return None

    def get(self, collection: str, key: str) -> Optional[Document]:
        with self._lock:
            document = self._collections.get(collection, {}).get(key)
            return copy.deepcopy(document)

    def set(self, collection: str, key: str, document: Document) -> None:
        with self._lock:
            self._collections.setdefault(collection, {})[key] = copy.deepcopy(document)

    def update(self, collection: str, key: str, fields: Document) -> bool:
        with self._lock:
            document = self._collections.get(collection, {}).get(key)
            if document is None:
                return False
            document.update(copy.deepcopy(fields))
            return True

    def delete(self, collection: str, key: str) -> bool:
        with self._lock:
            return self._collections.get(collection, {}).pop(key, None) is not None

    def scan(self, collection: str) -> list[Document]:
        with self._lock:
            documents = self._collections.get(collection, {})
            return [copy.deepcopy(documents[key]) for key in sorted(documents)]

    def query(
        self,
        collection: str,
        criteria: Document,
        limit: Optional[int] = None,
        for_update: bool = False,
    ) -> list[Document]:
        matches = [
            document for document in self.scan(collection)
            if all(document.get(field) == value for field, value in criteria.items())
        ]
        return matches if limit is None else matches[:limit]

    def increment(self, collection: str, key: str, field: str, delta: int) -> Optional[int]:
        with self._lock:
            document = self._collections.get(collection, {}).get(key)
            if document is None:
                return None
            value = max(int(document.get(field) or 0) + delta, 0)
            document[field] = value
            return value

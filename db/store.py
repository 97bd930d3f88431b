"""
db/store.py
-----------
Document-store abstraction used by every repository.

Documents are flat JSON objects grouped into collections and addressed by
key. Collection-wide reads return documents in collection order, which is
ascending key order; keys come from `utils.keys.generate_key` and therefore
sort in creation order.

The active store is process-global, mirroring the connection pool:
call `init_store()` once at startup and `get_store()` everywhere else.
"""

import abc
from contextlib import AbstractContextManager
from typing import Any, Optional

from utils.keys import generate_key
from utils.logger import get_logger

logger = get_logger(__name__)

Document = dict[str, Any]


class DocumentStore(abc.ABC):
    """Keyed get/set/merge/delete over collections of JSON documents."""

    def new_key(self, collection: str) -> str:
        """Generate a new unique key under `collection`."""
        return generate_key()

    @abc.abstractmethod
    def get(self, collection: str, key: str) -> Optional[Document]:
        """Return the document stored under `key`, or None."""

    @abc.abstractmethod
    def set(self, collection: str, key: str, document: Document) -> None:
        """Store `document` under `key`, overwriting any existing document."""

    @abc.abstractmethod
    def update(self, collection: str, key: str, fields: Document) -> bool:
        """
        Merge `fields` into an existing document.

        Returns:
            True if the document existed and was updated. Missing documents
            are not created.
        """

    @abc.abstractmethod
    def delete(self, collection: str, key: str) -> bool:
        """Remove a document. Returns True if one was removed."""

    @abc.abstractmethod
    def scan(self, collection: str) -> list[Document]:
        """Return every document of a collection in collection order."""

    @abc.abstractmethod
    def query(
        self,
        collection: str,
        criteria: Document,
        limit: Optional[int] = None,
        for_update: bool = False,
    ) -> list[Document]:
        """
        Return documents whose fields equal every value in `criteria`,
        in collection order.

        Args:
            collection: Collection name.
            criteria: Field -> required value (exact, case-sensitive).
            limit: Maximum number of documents to return.
            for_update: Lock matched documents until the surrounding
                transaction ends.
        """

    @abc.abstractmethod
    def increment(self, collection: str, key: str, field: str, delta: int) -> Optional[int]:
        """
        Atomically add `delta` to a numeric field, flooring the result at zero.
        A missing field counts as zero.

        Returns:
            The new value, or None when the document does not exist.
        """

    @abc.abstractmethod
    def transaction(self) -> AbstractContextManager:
        """
        Group every store call made inside the block into one unit that is
        committed on exit and rolled back on error. Nested blocks join the
        outermost one.
        """

    @abc.abstractmethod
    def lock(self, *parts: str) -> None:
        """Hold a named lock until the surrounding transaction ends."""

    def close(self) -> None:
        """Release backend resources."""


_store: Optional[DocumentStore] = None


def init_store(store: Optional[DocumentStore] = None) -> DocumentStore:
    """
    Install the process-wide store.

    Args:
        store: An explicit store instance; when omitted the backend is
            chosen from STORE_BACKEND.

    Raises:
        ValueError: If STORE_BACKEND names an unknown backend.
    """
    global _store
    if store is None:
        store = _build_configured_store()
    _store = store
    logger.info(f"Document store initialized: {type(store).__name__}")
    return store


def _build_configured_store() -> DocumentStore:
    from config import STORE_BACKEND

    if STORE_BACKEND == "postgres":
        from db.postgres_store import PostgresDocumentStore
        return PostgresDocumentStore()
    if STORE_BACKEND == "memory":
        from db.memory_store import MemoryDocumentStore
        return MemoryDocumentStore()
    raise ValueError(f"Unknown STORE_BACKEND '{STORE_BACKEND}'")


def get_store() -> DocumentStore:
    """
    Get the active store.

    Raises:
        RuntimeError: If the store has not been initialized.
    """
    if _store is None:
        raise RuntimeError("Document store not initialized. Call init_store() first.")
    return _store


def close_store() -> None:
    """Close and forget the active store."""
    global _store
    if _store is not None:
        _store.close()
        _store = None
        logger.info("Document store closed.")

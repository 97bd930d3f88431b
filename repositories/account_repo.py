"""
repositories/account_repo.py
----------------------------
Data access layer for accounts (the `users` collection).
"""

from typing import Any, Optional

from db.store import DocumentStore, get_store
from models.account import Account, to_document_fields
from utils.documents import utc_now
from utils.logger import get_logger

logger = get_logger(__name__)


class AccountRepository:
    """Repository for CRUD operations on the users collection."""

    COLLECTION = "users"

    @property
    def store(self) -> DocumentStore:
        return get_store()

    # ── CREATE ────────────────────────────────────────────

    def add(self, account: Account) -> Account:
        """
        Persist a new account draft.

        Generates the key, stamps the creation time and zeroes both
        counters. Email uniqueness is not checked here.

        Args:
            account: Draft without id or timestamps.

        Returns:
            The same Account with `id`, `created_at` and counters populated.
        """
        account.id = self.store.new_key(self.COLLECTION)
        account.created_at = utc_now()
        account.followers_count = 0
        account.posts_count = 0
        self.store.set(self.COLLECTION, account.id, account.to_document())
        logger.info(f"Created {account.role} account {account.id}")
        return account

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, account_id: str) -> Optional[Account]:
        document = self.store.get(self.COLLECTION, account_id)
        return Account.from_document(document) if document else None

    def get_by_email(self, email: str) -> Optional[Account]:
        """
        Fetch the first account (in collection order) with exactly this email.
        The comparison is case-sensitive.
        """
        documents = self.store.query(self.COLLECTION, {"email": email}, limit=1)
        return Account.from_document(documents[0]) if documents else None

    def list_by_role(self, role: str) -> list[Account]:
        documents = self.store.query(self.COLLECTION, {"userType": role})
        return [Account.from_document(d) for d in documents]

    # ── UPDATE ────────────────────────────────────────────

    def update_fields(self, account_id: str, fields: dict[str, Any]) -> bool:
        """
        Merge the given attributes into a stored account.

        Args:
            account_id: Account key.
            fields: Attribute name -> value; None values are dropped.

        Returns:
            True if the account exists and was updated.
        """
        document_fields = to_document_fields(fields)
        if not document_fields:
            return self.store.get(self.COLLECTION, account_id) is not None
        updated = self.store.update(self.COLLECTION, account_id, document_fields)
        if updated:
            logger.info(f"Updated account {account_id}: {', '.join(sorted(document_fields))}")
        return updated

    def adjust_counter(self, account_id: str, field: str, delta: int) -> Optional[int]:
        """
        Atomically add `delta` to a denormalized counter, floored at zero.

        Returns:
            The new value, or None when the account is missing (update skipped).
        """
        value = self.store.increment(self.COLLECTION, account_id, field, delta)
        if value is None:
            logger.info(f"Skipped {field} update for missing account {account_id}")
        return value

"""
repositories/relationship_repo.py
---------------------------------
Data access layer for the join collections: follows, likes and saves.
All three share one shape, (userId, <target>), and differ only in the
collection name and the target field.
"""

from typing import Optional

from db.store import DocumentStore, get_store
from models.relationship import Relationship
from utils.documents import utc_now
from utils.logger import get_logger

logger = get_logger(__name__)


class RelationshipRepository:
    """Repository for one relationship collection."""

    COLLECTION: str = ""
    TARGET_FIELD: str = ""

    @property
    def store(self) -> DocumentStore:
        return get_store()

    # ── CREATE ────────────────────────────────────────────

    def add(self, user_id: str, target_id: str) -> Relationship:
        """Insert a relationship record unconditionally (duplicates allowed)."""
        relationship = Relationship(
            user_id=user_id,
            target_id=target_id,
            id=self.store.new_key(self.COLLECTION),
            created_at=utc_now(),
        )
        self.store.set(
            self.COLLECTION, relationship.id, relationship.to_document(self.TARGET_FIELD)
        )
        logger.info(f"Added {self.COLLECTION} {user_id} -> {target_id}")
        return relationship

    # ── READ ──────────────────────────────────────────────

    def find(self, user_id: str, target_id: str, for_update: bool = False) -> Optional[Relationship]:
        """
        Fetch the first relationship (in collection order) for the pair.

        Args:
            user_id: Acting account.
            target_id: School or post id.
            for_update: Lock the record until the surrounding transaction ends.
        """
        documents = self.store.query(
            self.COLLECTION,
            {"userId": user_id, self.TARGET_FIELD: target_id},
            limit=1,
            for_update=for_update,
        )
        return self._to_relationship(documents[0]) if documents else None

    def exists(self, user_id: str, target_id: str) -> bool:
        return self.find(user_id, target_id) is not None

    def target_ids(self, user_id: str) -> list[str]:
        """Target ids of every relationship owned by the user, in collection order."""
        documents = self.store.query(self.COLLECTION, {"userId": user_id})
        return [d[self.TARGET_FIELD] for d in documents]

    def count_for_target(self, target_id: str) -> int:
        return len(self.store.query(self.COLLECTION, {self.TARGET_FIELD: target_id}))

    # ── DELETE ────────────────────────────────────────────

    def remove(self, relationship_id: str) -> bool:
        """Delete one relationship record. Returns True if it was still there."""
        deleted = self.store.delete(self.COLLECTION, relationship_id)
        if deleted:
            logger.info(f"Removed {self.COLLECTION} record {relationship_id}")
        return deleted

    # ── HELPERS ───────────────────────────────────────────

    def _to_relationship(self, document: dict) -> Relationship:
        return Relationship.from_document(document, self.TARGET_FIELD)


class FollowRepository(RelationshipRepository):
    """Account follows school."""

    COLLECTION = "follows"
    TARGET_FIELD = "schoolId"


class LikeRepository(RelationshipRepository):
    """Account likes post."""

    COLLECTION = "likes"
    TARGET_FIELD = "postId"


class SaveRepository(RelationshipRepository):
    """Account saved post."""

    COLLECTION = "saves"
    TARGET_FIELD = "postId"

"""
services/engagement_service.py
-------------------------------
Business logic for liking and saving posts. Likes keep the post's
`likes` counter in step; saves have no counter.
"""

from typing import Optional

from config import ALLOW_DUPLICATE_RELATIONSHIPS
from db.store import get_store
from repositories.post_repo import PostRepository
from repositories.relationship_repo import (
    LikeRepository,
    RelationshipRepository,
    SaveRepository,
)
from utils.logger import get_logger

logger = get_logger(__name__)


class EngagementService:
    """
    Like/unlike and save/unsave.

    Args:
        allow_duplicates: When False, repeating a like or save is a no-op.
    """

    def __init__(self, allow_duplicates: Optional[bool] = None):
        self.likes = LikeRepository()
        self.saves = SaveRepository()
        self.posts = PostRepository()
        self.allow_duplicates = (
            ALLOW_DUPLICATE_RELATIONSHIPS if allow_duplicates is None else allow_duplicates
        )

    # ── LIKES ─────────────────────────────────────────────

    def like_post(self, account_id: str, post_id: str) -> None:
        """Insert a like and increment the post's counter (skipped if the post is gone)."""
        with get_store().transaction():
            if self._add(self.likes, account_id, post_id):
                self.posts.adjust_likes(post_id, +1)

    def unlike_post(self, account_id: str, post_id: str) -> None:
        """Delete the first matching like and decrement the counter, floored at zero."""
        with get_store().transaction():
            if self._remove(self.likes, account_id, post_id):
                self.posts.adjust_likes(post_id, -1)

    def has_liked(self, account_id: str, post_id: str) -> bool:
        return self.likes.exists(account_id, post_id)

    # ── SAVES ─────────────────────────────────────────────

    def save_post(self, account_id: str, post_id: str) -> None:
        with get_store().transaction():
            self._add(self.saves, account_id, post_id)

    def unsave_post(self, account_id: str, post_id: str) -> None:
        with get_store().transaction():
            self._remove(self.saves, account_id, post_id)

    def has_saved(self, account_id: str, post_id: str) -> bool:
        return self.saves.exists(account_id, post_id)

    # ── HELPERS ───────────────────────────────────────────

    def _add(self, repo: RelationshipRepository, account_id: str, post_id: str) -> bool:
        """Insert a relationship; returns False when the duplicate policy skipped it."""
        if not self.allow_duplicates:
            get_store().lock(repo.COLLECTION, account_id, post_id)
            if repo.exists(account_id, post_id):
                logger.info(f"{repo.COLLECTION}: {account_id} -> {post_id} exists; ignored")
                return False
        repo.add(account_id, post_id)
        return True

    @staticmethod
    def _remove(repo: RelationshipRepository, account_id: str, post_id: str) -> bool:
        """Delete the first matching relationship; returns True if one was removed."""
        relationship = repo.find(account_id, post_id, for_update=True)
        return relationship is not None and repo.remove(relationship.id)

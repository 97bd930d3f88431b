"""
repositories/post_repo.py
-------------------------
Data access layer for posts. Ordering rules live in PostService;
reads here return collection order.
"""

from typing import Optional

from db.store import DocumentStore, get_store
from models.post import LIKES, Post
from utils.documents import utc_now
from utils.logger import get_logger

logger = get_logger(__name__)


class PostRepository:
    """Repository for CRUD operations on the posts collection."""

    COLLECTION = "posts"

    @property
    def store(self) -> DocumentStore:
        return get_store()

    # ── CREATE ────────────────────────────────────────────

    def add(self, post: Post) -> Post:
        """
        Insert a new post.

        Args:
            post: Draft without id, timestamp or likes.

        Returns:
            The same Post with `id`, `created_at` and `likes = 0` populated.
        """
        post.id = self.store.new_key(self.COLLECTION)
        post.created_at = utc_now()
        post.likes = 0
        self.store.set(self.COLLECTION, post.id, post.to_document())
        logger.info(f"Created {post.category} post {post.id} for school {post.school_id}")
        return post

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, post_id: str) -> Optional[Post]:
        document = self.store.get(self.COLLECTION, post_id)
        return Post.from_document(document) if document else None

    def list_all(self) -> list[Post]:
        return [Post.from_document(d) for d in self.store.scan(self.COLLECTION)]

    def list_by_school(self, school_id: str) -> list[Post]:
        documents = self.store.query(self.COLLECTION, {"schoolId": school_id})
        return [Post.from_document(d) for d in documents]

    # ── UPDATE ────────────────────────────────────────────

    def adjust_likes(self, post_id: str, delta: int) -> Optional[int]:
        """
        Atomically add `delta` to the post's like counter, floored at zero.

        Returns:
            The new count, or None when the post is missing (update skipped).
        """
        value = self.store.increment(self.COLLECTION, post_id, LIKES, delta)
        if value is None:
            logger.info(f"Skipped likes update for missing post {post_id}")
        return value

"""
services/post_service.py
-------------------------
Business logic for posts: publishing, the schools' `postsCount`, and
feed assembly with emergency-first ordering.
"""

from typing import Optional

from db.store import get_store
from models.account import POSTS_COUNT, Account
from models.post import CATEGORIES, Post
from repositories.account_repo import AccountRepository
from repositories.post_repo import PostRepository
from repositories.relationship_repo import SaveRepository
from services.follow_service import FollowService
from utils.errors import NotFoundError, PermissionDeniedError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


def _sort_key(post: Post) -> tuple[bool, float]:
    created = post.created_at.timestamp() if post.created_at else float("-inf")
    return (not post.is_emergency(), -created)


def sort_posts(posts: list[Post]) -> list[Post]:
    """
    Emergency posts first, then newest first within each tier.
    The sort is stable, so exact ties keep their collection order.
    """
    return sorted(posts, key=_sort_key)


def filter_category(posts: list[Post], category: Optional[str]) -> list[Post]:
    """
    Keep only posts of `category`, preserving order. None or 'all' keeps everything.

    Raises:
        ValidationError: If the category is unknown.
    """
    if category is None or category == "all":
        return posts
    if category not in CATEGORIES:
        raise ValidationError(
            f"Unknown category '{category}'. Use one of: {', '.join(CATEGORIES)}."
        )
    return [post for post in posts if post.category == category]


class PostService:
    """Handles all business logic related to posts and feeds."""

    def __init__(self):
        self.repo = PostRepository()
        self.accounts = AccountRepository()
        self.saves = SaveRepository()
        self.follows = FollowService()

    # ── CREATE ────────────────────────────────────────────

    def create_post(self, draft: Post) -> Post:
        """
        Persist a post and bump its school's postsCount in one transaction.
        A missing school record only skips the counter.
        """
        with get_store().transaction():
            post = self.repo.add(draft)
            self.accounts.adjust_counter(post.school_id, POSTS_COUNT, +1)
        return post

    def publish(
        self,
        author: Account,
        content: str,
        category: str,
        image_url: Optional[str] = None,
        link_url: Optional[str] = None,
        link_title: Optional[str] = None,
    ) -> Post:
        """
        Validate and create a post on behalf of a school account.

        The school's display name and photo are copied onto the post.

        Raises:
            PermissionDeniedError: If `author` is not a school.
            ValidationError: On empty content or an unknown category.
        """
        if not author.is_school():
            raise PermissionDeniedError("Only school accounts can create posts.")
        content = (content or "").strip()
        if not content:
            raise ValidationError("Please write something for your post.")
        category = (category or "").strip().lower()
        if category not in CATEGORIES:
            raise ValidationError(
                f"Unknown category '{category}'. Use one of: {', '.join(CATEGORIES)}."
            )

        draft = Post(
            school_id=author.id,
            school_name=author.display_name,
            school_photo_url=author.profile_photo_url,
            content=content,
            category=category,
            image_url=(image_url or "").strip() or None,
            link_url=(link_url or "").strip() or None,
            link_title=(link_title or "").strip() or None,
        )
        return self.create_post(draft)

    # ── READ ──────────────────────────────────────────────

    def get_post(self, post_id: str) -> Post:
        """
        Fetch one post by id.

        Raises:
            NotFoundError: If there is no post with this id.
        """
        post = self.repo.get_by_id(post_id)
        if post is None:
            raise NotFoundError(f"No post with id {post_id}.")
        return post

    def list_all_posts(self, category: Optional[str] = None) -> list[Post]:
        return filter_category(sort_posts(self.repo.list_all()), category)

    def list_posts_by_school(self, school_id: str) -> list[Post]:
        return sort_posts(self.repo.list_by_school(school_id))

    def list_feed_for_account(self, account_id: str, category: Optional[str] = None) -> list[Post]:
        """
        Posts of the schools the account follows, in feed order.
        An account that follows nobody gets an empty feed.
        """
        school_ids = {school.id for school in self.follows.list_followed_schools(account_id)}
        if not school_ids:
            return []
        posts = [post for post in self.list_all_posts() if post.school_id in school_ids]
        return filter_category(posts, category)

    def list_saved_posts(self, account_id: str) -> list[Post]:
        """Saved posts in feed order; saves of deleted posts are dropped."""
        post_ids = set(self.saves.target_ids(account_id))
        if not post_ids:
            return []
        return [post for post in self.list_all_posts() if post.id in post_ids]

    def list_posts_for_viewer(self, viewer: Optional[Account], category: Optional[str] = None) -> list[Post]:
        """
        What the feed screen shows: user accounts see their followed schools,
        school accounts and anonymous viewers see every post.
        """
        if viewer is not None and not viewer.is_school():
            return self.list_feed_for_account(viewer.id, category)
        return self.list_all_posts(category)

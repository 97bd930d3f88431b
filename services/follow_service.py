"""
services/follow_service.py
---------------------------
Business logic for accounts following schools, including the schools'
denormalized `followersCount`.
"""

from typing import Iterable, Optional

from config import ALLOW_DUPLICATE_RELATIONSHIPS
from db.store import get_store
from models.account import FOLLOWERS_COUNT, Account
from repositories.account_repo import AccountRepository
from repositories.relationship_repo import FollowRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class FollowService:
    """
    Follow/unfollow with counter bookkeeping.

    Each relationship change and its counter adjustment run in one store
    transaction, and the counter is changed with an atomic increment, so
    concurrent followers can't lose updates.

    Args:
        allow_duplicates: When False, following an already-followed school
            is a no-op instead of inserting a second record.
    """

    def __init__(self, allow_duplicates: Optional[bool] = None):
        self.repo = FollowRepository()
        self.accounts = AccountRepository()
        self.allow_duplicates = (
            ALLOW_DUPLICATE_RELATIONSHIPS if allow_duplicates is None else allow_duplicates
        )

    def follow_school(self, account_id: str, school_id: str) -> None:
        """
        Record that `account_id` follows `school_id` and bump the school's
        followersCount. A missing school record only skips the counter.
        """
        store = get_store()
        with store.transaction():
            if not self.allow_duplicates:
                store.lock(self.repo.COLLECTION, account_id, school_id)
                if self.repo.exists(account_id, school_id):
                    logger.info(f"{account_id} already follows {school_id}; ignored")
                    return
            self.repo.add(account_id, school_id)
            self.accounts.adjust_counter(school_id, FOLLOWERS_COUNT, +1)

    def unfollow_school(self, account_id: str, school_id: str) -> None:
        """
        Remove the first matching follow record and decrement the counter,
        never below zero. No-op when not following.
        """
        with get_store().transaction():
            follow = self.repo.find(account_id, school_id, for_update=True)
            if follow is None:
                return
            if self.repo.remove(follow.id):
                self.accounts.adjust_counter(school_id, FOLLOWERS_COUNT, -1)

    def is_following(self, account_id: str, school_id: str) -> bool:
        return self.repo.exists(account_id, school_id)

    def list_followed_schools(self, account_id: str) -> list[Account]:
        """
        Resolve every followed school id to its account, in follow order.
        Ids that no longer resolve are skipped.
        """
        schools = []
        for school_id in self.repo.target_ids(account_id):
            school = self.accounts.get_by_id(school_id)
            if school is not None:
                schools.append(school)
        return schools

    def count_followers(self, school_id: str) -> int:
        """Live count of follow records targeting the school."""
        return self.repo.count_for_target(school_id)

    def following_status(self, account_id: str, school_ids: Iterable[str]) -> dict[str, bool]:
        """Map each school id to whether `account_id` follows it."""
        followed = set(self.repo.target_ids(account_id))
        return {school_id: school_id in followed for school_id in school_ids}

"""
models/relationship.py
----------------------
Join records between an account and a school (follow) or a post (like, save).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from utils.documents import clean_document, format_timestamp, parse_timestamp


@dataclass
class Relationship:
    """
    Attributes:
        user_id: The acting account.
        target_id: The followed school or the liked/saved post.
        id: Store key (None before insert).
        created_at: When the relationship was created.
    """
    user_id: str
    target_id: str
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_document(self, target_field: str) -> dict[str, Any]:
        return clean_document({
            "id": self.id,
            "userId": self.user_id,
            target_field: self.target_id,
            "createdAt": format_timestamp(self.created_at) if self.created_at else None,
        })

    @classmethod
    def from_document(cls, document: dict[str, Any], target_field: str) -> "Relationship":
        return cls(
            user_id=document["userId"],
            target_id=document[target_field],
            id=document.get("id"),
            created_at=parse_timestamp(document.get("createdAt")),
        )

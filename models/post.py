"""
models/post.py
--------------
Domain model for school announcements.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from utils.documents import clean_document, format_timestamp, parse_timestamp

CATEGORY_NOTICE = "notice"
CATEGORY_EXAM = "exam"
CATEGORY_EVENT = "event"
CATEGORY_HOLIDAY = "holiday"
CATEGORY_EMERGENCY = "emergency"
CATEGORIES = (
    CATEGORY_NOTICE,
    CATEGORY_EXAM,
    CATEGORY_EVENT,
    CATEGORY_HOLIDAY,
    CATEGORY_EMERGENCY,
)

_FIELDS = {
    "id": "id",
    "school_id": "schoolId",
    "school_name": "schoolName",
    "school_photo_url": "schoolPhotoUrl",
    "content": "content",
    "category": "category",
    "image_url": "imageUrl",
    "link_url": "linkUrl",
    "link_title": "linkTitle",
    "likes": "likes",
}

LIKES = _FIELDS["likes"]


@dataclass
class Post:
    """
    Represents a school-authored announcement.

    School name and photo are a snapshot taken at creation time and are
    not kept in sync with later profile edits. Posts are immutable once
    created apart from the `likes` counter.
    """
    school_id: str
    school_name: str
    content: str
    category: str  # one of CATEGORIES
    school_photo_url: Optional[str] = None
    image_url: Optional[str] = None
    link_url: Optional[str] = None
    link_title: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    likes: int = 0

    def is_emergency(self) -> bool:
        return self.category == CATEGORY_EMERGENCY

    def to_document(self) -> dict[str, Any]:
        document = {key: getattr(self, attr) for attr, key in _FIELDS.items()}
        if self.created_at is not None:
            document["createdAt"] = format_timestamp(self.created_at)
        return clean_document(document)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Post":
        values = {attr: document.get(key) for attr, key in _FIELDS.items()}
        values["likes"] = int(values["likes"] or 0)
        values["created_at"] = parse_timestamp(document.get("createdAt"))
        return cls(**values)

    def __str__(self) -> str:
        return f"[{self.category}] {self.school_name}: {self.content[:40]}"

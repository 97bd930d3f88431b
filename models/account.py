"""
models/account.py
-----------------
Domain model for accounts: schools (publishers) and users (parents/students).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from utils.documents import clean_document, format_timestamp, parse_timestamp

ROLE_SCHOOL = "school"
ROLE_USER = "user"
ROLES = (ROLE_SCHOOL, ROLE_USER)

# Attribute name -> stored document key.
_FIELDS = {
    "id": "id",
    "name": "name",
    "email": "email",
    "password": "password",
    "role": "userType",
    "profile_photo_url": "profilePhotoUrl",
    "city": "city",
    "state": "state",
    "school_name": "schoolName",
    "address": "address",
    "phone": "phone",
    "website": "website",
    "followers_count": "followersCount",
    "posts_count": "postsCount",
}

# Fields a profile edit may touch.
EDITABLE_FIELDS = (
    "name", "profile_photo_url", "city", "state",
    "school_name", "address", "phone", "website",
)

FOLLOWERS_COUNT = _FIELDS["followers_count"]
POSTS_COUNT = _FIELDS["posts_count"]


@dataclass
class Account:
    """
    A school or user identity record.

    Attributes:
        id: Store key (None for drafts).
        name: Display name.
        email: Login email, compared case-sensitively.
        password: Password hash as stored.
        role: Either 'school' or 'user'.
        profile_photo_url: Optional avatar URL, passed through untouched.
        city: Free-text city.
        state: Free-text state/region.
        school_name: School accounts only.
        address: School accounts only.
        phone: School accounts only.
        website: School accounts only.
        created_at: Creation timestamp (UTC).
        followers_count: Denormalized number of follow relationships.
        posts_count: Denormalized number of posts owned.
    """
    name: str
    email: str
    password: str
    role: str  # 'school' | 'user'
    profile_photo_url: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    school_name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    followers_count: int = 0
    posts_count: int = 0

    def is_school(self) -> bool:
        return self.role == ROLE_SCHOOL

    @property
    def display_name(self) -> str:
        return self.school_name or self.name

    def to_document(self) -> dict[str, Any]:
        document = {key: getattr(self, attr) for attr, key in _FIELDS.items()}
        if self.created_at is not None:
            document["createdAt"] = format_timestamp(self.created_at)
        return clean_document(document)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Account":
        values = {attr: document.get(key) for attr, key in _FIELDS.items()}
        values["followers_count"] = int(values["followers_count"] or 0)
        values["posts_count"] = int(values["posts_count"] or 0)
        values["created_at"] = parse_timestamp(document.get("createdAt"))
        return cls(**values)

    def __str__(self) -> str:
        return f"{self.display_name} <{self.email}> ({self.role})"


def to_document_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """
    Map attribute names of a partial update to stored keys, dropping None values.

    Raises:
        KeyError: If a field is not an account attribute.
    """
    unknown = set(fields) - set(_FIELDS)
    if unknown:
        raise KeyError(f"Unknown account fields: {', '.join(sorted(unknown))}")
    return clean_document({_FIELDS[attr]: value for attr, value in fields.items()})

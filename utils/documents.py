"""
utils/documents.py
------------------
Helpers shared by the models and the store for building documents.
"""

from datetime import datetime, timezone
from typing import Any, Optional


def clean_document(document: dict[str, Any]) -> dict[str, Any]:
    """Return a copy without keys whose value is None; the store never sees nulls."""
    return {key: value for key, value in document.items() if value is not None}


def utc_now() -> datetime:
    """Current UTC time truncated to the millisecond precision that gets stored."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def format_timestamp(value: datetime) -> str:
    """Serialize as ISO-8601 UTC with millisecond precision and a 'Z' suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored timestamp; naive values are taken as UTC."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed

"""
utils/parsing.py
----------------
Argument parsing shared by the command handlers.
"""


def split_fields(text: str) -> list[str]:
    """
    Split a pipe-separated argument string into trimmed fields.

    Example:
        "Greenwood High | info@greenwood.edu | secret" ->
        ["Greenwood High", "info@greenwood.edu", "secret"]
    """
    if not text or not text.strip():
        return []
    return [part.strip() for part in text.split("|")]


def optional_field(parts: list[str], index: int) -> str | None:
    """The field at `index`, or None when absent or blank."""
    if index < len(parts) and parts[index]:
        return parts[index]
    return None

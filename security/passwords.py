"""
security/passwords.py
---------------------
Salted password hashing with bcrypt.
"""

import bcrypt

from utils.logger import get_logger

logger = get_logger(__name__)

# bcrypt ignores input past 72 bytes.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash suitable for storing in the account record."""
    secret = password.encode("utf-8")[:MAX_PASSWORD_BYTES]
    return bcrypt.hashpw(secret, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, stored_hash: str | None) -> bool:
    """
    Check a password against a stored hash.

    Records whose stored value is not a bcrypt hash never verify.
    """
    if not stored_hash:
        return False
    secret = password.encode("utf-8")[:MAX_PASSWORD_BYTES]
    try:
        return bcrypt.checkpw(secret, stored_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password is not a bcrypt hash; rejecting login.")
        return False

"""
security/session.py
-------------------
Per-Telegram-user session: the currently logged-in account, if any.

The Session lives in `context.user_data`, so python-telegram-bot scopes it
to one Telegram user and, with PicklePersistence configured, keeps it
across restarts. Only the auth handlers create, refresh or end it; every
other handler reads it.
"""

from dataclasses import dataclass, replace
from typing import Optional

from telegram.ext import ContextTypes

from models.account import Account
from utils.logger import get_logger

logger = get_logger(__name__)

_SESSION_KEY = "session"


@dataclass
class Session:
    """The account this Telegram user is logged in as."""
    account: Optional[Account] = None

    @property
    def is_authenticated(self) -> bool:
        return self.account is not None

    @property
    def account_id(self) -> Optional[str]:
        return self.account.id if self.account else None


def _public(account: Account) -> Account:
    """Copy of the account without the password hash."""
    return replace(account, password="")


def get_session(context: ContextTypes.DEFAULT_TYPE) -> Session:
    """Return this user's session, creating an anonymous one on first use."""
    session = context.user_data.get(_SESSION_KEY)
    if not isinstance(session, Session):
        session = Session()
        context.user_data[_SESSION_KEY] = session
    return session


def start_session(context: ContextTypes.DEFAULT_TYPE, account: Account) -> Session:
    """Log in as `account`, replacing any previous session."""
    session = Session(account=_public(account))
    context.user_data[_SESSION_KEY] = session
    logger.info(f"Session started for account {account.id}")
    return session


def refresh_session(context: ContextTypes.DEFAULT_TYPE, account: Account) -> None:
    """Replace the cached account record after it changed in the store."""
    session = get_session(context)
    if session.account_id == account.id:
        session.account = _public(account)


def end_session(context: ContextTypes.DEFAULT_TYPE) -> Optional[Account]:
    """Log out. Returns the account that was logged in, if any."""
    session = context.user_data.pop(_SESSION_KEY, None)
    account = session.account if isinstance(session, Session) else None
    if account:
        logger.info(f"Session ended for account {account.id}")
    return account

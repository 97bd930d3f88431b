"""
security/auth.py
-----------------
Access guards for bot handlers, based on the per-user Session.
"""

from functools import wraps
from typing import Callable

from telegram import Update
from telegram.ext import ContextTypes

from security.session import get_session
from utils.logger import get_logger

logger = get_logger(__name__)

LOGIN_REQUIRED_TEXT = "🔑 Please log in first: /login <email> <password>"
SCHOOL_ONLY_TEXT = "🏫 Only school accounts can do that."


def login_required(func: Callable):
    """
    Decorator that restricts a handler to logged-in Telegram users.

    Usage:
        @login_required
        async def my_handler(update, context):
            session = get_session(context)
            ...
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        if not update.effective_user:
            return
        if not get_session(context).is_authenticated:
            await update.message.reply_text(LOGIN_REQUIRED_TEXT)
            return
        return await func(update, context, *args, **kwargs)

    return wrapper


def school_only(func: Callable):
    """
    Decorator that restricts a handler to logged-in school accounts.
    Implies login_required.
    """
    @wraps(func)
    @login_required
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        account = get_session(context).account
        if not account.is_school():
            logger.warning(
                f"🚫 Account {account.id} ({account.role}) tried school-only {func.__name__}"
            )
            await update.message.reply_text(SCHOOL_ONLY_TEXT)
            return
        return await func(update, context, *args, **kwargs)

    return wrapper

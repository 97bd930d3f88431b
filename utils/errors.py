"""
utils/errors.py
---------------
Closed set of failure kinds raised by the services and the store,
plus the handler decorator that turns them into short replies.
"""

from functools import wraps
from typing import Callable

from telegram import Update
from telegram.ext import ContextTypes

from utils.logger import get_logger

logger = get_logger(__name__)


class SchoolPostError(Exception):
    """Base class for every error the bot reports back to a user."""

    user_message = "⚠️ Something went wrong. Please try again."

    def __init__(self, message: str = ""):
        super().__init__(message or self.user_message)
        self.message = message or self.user_message


class NotFoundError(SchoolPostError):
    """A referenced account, school or post does not exist."""

    user_message = "🔍 Not found."


class InvalidCredentialsError(SchoolPostError):
    """Unknown email or wrong password; the two are never told apart."""

    user_message = "🔒 Invalid email or password."


class ValidationError(SchoolPostError):
    """Input was rejected before reaching the store."""

    user_message = "⚠️ Invalid input."


class PermissionDeniedError(SchoolPostError):
    """The current account may not perform the operation."""

    user_message = "⛔ You are not allowed to do that."


class StoreError(SchoolPostError):
    """The document store failed; the operation may be partially applied."""

    user_message = "💥 The database is unavailable right now. Please try again later."


def reply_on_error(func: Callable):
    """
    Decorator for command handlers: replies with the error's message
    instead of letting a SchoolPostError escape into the bot loop.

    Replies go to the chat rather than quoting the message, which may
    already be deleted.

    Store failures keep their technical detail out of the chat and are
    logged with traceback instead.
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        try:
            return await func(update, context, *args, **kwargs)
        except StoreError:
            logger.exception(f"Store failure in {func.__name__}")
            await update.effective_chat.send_message(StoreError.user_message)
        except SchoolPostError as e:
            logger.info(f"{func.__name__} rejected: {e.message}")
            await update.effective_chat.send_message(e.message)

    return wrapper

"""
handlers/auth_handler.py
-------------------------
Handles signup, login and logout. These are the only handlers that
start or end a session.
"""

from telegram import Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from models.account import ROLE_SCHOOL, ROLE_USER, Account
from security.rate_limiter import rate_limited
from security.session import end_session, get_session, start_session
from services.account_service import AccountService
from utils.errors import reply_on_error
from utils.logger import get_logger
from utils.parsing import optional_field, split_fields

logger = get_logger(__name__)
account_service = AccountService()

SIGNUP_USAGE = (
    "👪 Create a parent/student account:\n"
    "/signup name | email | password | city\n"
    "/signup name | email | password | city | state\n\n"
    "Example:\n"
    "/signup Alice Rao | alice@example.com | s3cret | Pune | Maharashtra"
)

SIGNUP_SCHOOL_USAGE = (
    "🏫 Register a school:\n"
    "/signup_school school name | email | password | city | address\n"
    "Optional extra fields: | phone | website | photo URL\n\n"
    "Example:\n"
    "/signup_school Greenwood High | office@greenwood.edu | s3cret | Pune | 12 MG Road | 020-5550100"
)


async def _forget_password_message(update: Update) -> None:
    """Delete the user's message that carried a password."""
    try:
        await update.message.delete()
    except TelegramError as e:
        logger.warning(f"Could not delete credentials message: {e}")


@rate_limited
@reply_on_error
async def signup_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /signup - register a parent/student account and log in.

    Usage:
        /signup name | email | password | city [| state]
    """
    parts = split_fields(" ".join(context.args or []))
    if len(parts) >= 3:
        await _forget_password_message(update)
    if len(parts) < 4:
        await update.effective_chat.send_message(SIGNUP_USAGE)
        return

    draft = Account(
        name=parts[0],
        email=parts[1],
        password=parts[2],
        role=ROLE_USER,
        city=optional_field(parts, 3),
        state=optional_field(parts, 4),
    )
    account = account_service.register(draft)
    start_session(context, account)
    await update.effective_chat.send_message(
        f"🎉 Welcome to SchoolPost, {account.name}!\n"
        f"Find schools to follow with /schools, then read your /feed."
    )


@rate_limited
@reply_on_error
async def signup_school_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /signup_school - register a school account and log in.

    Usage:
        /signup_school name | email | password | city | address [| phone | website | photo]
    """
    parts = split_fields(" ".join(context.args or []))
    if len(parts) >= 3:
        await _forget_password_message(update)
    if len(parts) < 5:
        await update.effective_chat.send_message(SIGNUP_SCHOOL_USAGE)
        return

    draft = Account(
        name=parts[0],
        school_name=parts[0],
        email=parts[1],
        password=parts[2],
        role=ROLE_SCHOOL,
        city=optional_field(parts, 3),
        address=optional_field(parts, 4),
        phone=optional_field(parts, 5),
        website=optional_field(parts, 6),
        profile_photo_url=optional_field(parts, 7),
    )
    account = account_service.register(draft)
    start_session(context, account)
    await update.effective_chat.send_message(
        f"🏫 {account.display_name} is registered!\n"
        f"Publish announcements with /post."
    )


@rate_limited
@reply_on_error
async def login_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /login <email> <password>.
    The message is deleted whatever the outcome, since it holds a password.
    """
    if not context.args or len(context.args) < 2:
        await update.message.reply_text("⚠️ Usage: /login <email> <password>")
        return

    email = context.args[0]
    password = " ".join(context.args[1:])
    await _forget_password_message(update)

    account = account_service.login(email, password)
    start_session(context, account)
    await update.effective_chat.send_message(f"👋 Welcome back, {account.display_name}!")


@rate_limited
async def logout_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /logout - end the session."""
    if not get_session(context).is_authenticated:
        await update.message.reply_text("You're not logged in.")
        return
    end_session(context)
    await update.message.reply_text("👋 Logged out.")

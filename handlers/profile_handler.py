"""
handlers/profile_handler.py
----------------------------
Handles /me and /edit for the logged-in account.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import login_required
from security.rate_limiter import rate_limited
from security.session import end_session, get_session, refresh_session
from services.account_service import AccountService
from services.follow_service import FollowService
from services.post_service import PostService
from utils.errors import ValidationError, reply_on_error
from utils.formatters import format_profile
from utils.logger import get_logger

logger = get_logger(__name__)
account_service = AccountService()
follow_service = FollowService()
post_service = PostService()

# /edit keyword -> account attribute
_EDIT_FIELDS = {
    "name": "name",
    "photo": "profile_photo_url",
    "city": "city",
    "state": "state",
}
_SCHOOL_EDIT_FIELDS = {
    "address": "address",
    "phone": "phone",
    "website": "website",
}


@rate_limited
@reply_on_error
@login_required
async def me_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /me - show the profile, re-read from the store."""
    session = get_session(context)
    account = account_service.find_account_by_id(session.account_id)
    if account is None:
        end_session(context)
        await update.message.reply_text("⚠️ Your account no longer exists. You've been logged out.")
        return
    refresh_session(context, account)

    text = format_profile(account)
    if not account.is_school():
        following = len(follow_service.list_followed_schools(account.id))
        saved = len(post_service.list_saved_posts(account.id))
        text += f"\n🏫 Following {following} schools · 🔖 {saved} saved posts"
    await update.message.reply_text(text)


@rate_limited
@reply_on_error
@login_required
async def edit_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /edit <field> <value>.

    Fields: name, photo, city, state; schools also address, phone, website.
    """
    account = get_session(context).account
    allowed = dict(_EDIT_FIELDS)
    if account.is_school():
        allowed.update(_SCHOOL_EDIT_FIELDS)

    if not context.args or len(context.args) < 2:
        await update.message.reply_text(
            "✏️ Usage: /edit <field> <value>\n"
            f"Fields: {', '.join(allowed)}"
        )
        return

    keyword = context.args[0].lower()
    if keyword not in allowed:
        raise ValidationError(f"Can't edit '{keyword}'. Fields: {', '.join(allowed)}.")

    value = " ".join(context.args[1:]).strip()
    updated = account_service.update_profile(account, **{allowed[keyword]: value})
    refresh_session(context, updated)
    await update.message.reply_text(f"✅ Profile updated.\n\n{format_profile(updated)}")

"""
handlers/school_handler.py
---------------------------
School discovery and follow management: /schools, /follow, /unfollow, /following.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import login_required
from security.rate_limiter import rate_limited
from security.session import get_session
from services.account_service import AccountService
from services.follow_service import FollowService
from utils.errors import reply_on_error
from utils.formatters import format_school
from utils.logger import get_logger

logger = get_logger(__name__)
account_service = AccountService()
follow_service = FollowService()


@rate_limited
@reply_on_error
async def schools_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /schools [query] - search schools by name or city.
    Logged-in viewers also see which schools they follow.
    """
    query = " ".join(context.args or [])
    schools = account_service.search_schools(query)
    if not schools:
        await update.message.reply_text(
            "🔍 No schools match that search." if query else "🏫 No schools registered yet."
        )
        return

    session = get_session(context)
    status = {}
    if session.is_authenticated:
        status = follow_service.following_status(session.account_id, [s.id for s in schools])

    lines = [format_school(school, status.get(school.id)) for school in schools]
    lines.append("\nFollow one with /follow <id>.")
    await update.message.reply_text("\n".join(lines))


@rate_limited
@reply_on_error
@login_required
async def follow_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /follow <school_id>."""
    if not context.args:
        await update.message.reply_text("⚠️ Usage: /follow <school id>")
        return

    school = account_service.get_school(context.args[0])
    follow_service.follow_school(get_session(context).account_id, school.id)
    await update.message.reply_text(
        f"✅ Following {school.display_name}. Their updates will show up in your /feed."
    )


@rate_limited
@reply_on_error
@login_required
async def unfollow_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /unfollow <school_id>. Unfollowing a school you don't follow is harmless."""
    if not context.args:
        await update.message.reply_text("⚠️ Usage: /unfollow <school id>")
        return

    school = account_service.get_school(context.args[0])
    follow_service.unfollow_school(get_session(context).account_id, school.id)
    await update.message.reply_text(
        f"👋 Unfollowed {school.display_name}. You will no longer see their updates."
    )


@rate_limited
@reply_on_error
@login_required
async def following_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /following - schools the user follows."""
    schools = follow_service.list_followed_schools(get_session(context).account_id)
    if not schools:
        await update.message.reply_text("🏫 You don't follow any schools yet. Try /schools.")
        return
    await update.message.reply_text("\n".join(format_school(s, True) for s in schools))

"""
handlers/engagement_handler.py
-------------------------------
Handles /like, /unlike, /save and /unsave.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.auth import login_required
from security.rate_limiter import rate_limited
from security.session import get_session
from services.engagement_service import EngagementService
from services.post_service import PostService
from utils.errors import reply_on_error
from utils.logger import get_logger

logger = get_logger(__name__)
engagement_service = EngagementService()
post_service = PostService()


async def _target_post(update: Update, context: ContextTypes.DEFAULT_TYPE, command: str):
    """Resolve the post id argument; replies with usage and returns None when absent."""
    if not context.args:
        await update.message.reply_text(f"⚠️ Usage: /{command} <post id>")
        return None
    return post_service.get_post(context.args[0].lstrip("#"))


@rate_limited
@reply_on_error
@login_required
async def like_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /like <post_id>."""
    post = await _target_post(update, context, "like")
    if post is None:
        return
    engagement_service.like_post(get_session(context).account_id, post.id)
    likes = post_service.get_post(post.id).likes
    await update.message.reply_text(f"❤️ Liked. This post now has {likes} likes.")


@rate_limited
@reply_on_error
@login_required
async def unlike_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /unlike <post_id>."""
    post = await _target_post(update, context, "unlike")
    if post is None:
        return
    engagement_service.unlike_post(get_session(context).account_id, post.id)
    likes = post_service.get_post(post.id).likes
    await update.message.reply_text(f"💔 Like removed. This post now has {likes} likes.")


@rate_limited
@reply_on_error
@login_required
async def save_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /save <post_id>."""
    post = await _target_post(update, context, "save")
    if post is None:
        return
    engagement_service.save_post(get_session(context).account_id, post.id)
    await update.message.reply_text("🔖 Saved. See your bookmarks with /saved.")


@rate_limited
@reply_on_error
@login_required
async def unsave_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /unsave <post_id>."""
    post = await _target_post(update, context, "unsave")
    if post is None:
        return
    engagement_service.unsave_post(get_session(context).account_id, post.id)
    await update.message.reply_text("🗑️ Removed from your saved posts.")

"""
handlers/post_handler.py
-------------------------
Handles publishing and reading posts: /post, /feed, /posts, /saved.
Delegates all logic to PostService.
"""

from telegram import Update
from telegram.ext import ContextTypes

from config import FEED_PAGE_SIZE
from models.post import CATEGORIES
from security.auth import login_required, school_only
from security.rate_limiter import rate_limited
from security.session import get_session
from services.account_service import AccountService
from services.post_service import PostService
from utils.errors import reply_on_error
from utils.formatters import format_post, format_posts
from utils.logger import get_logger
from utils.parsing import optional_field, split_fields

logger = get_logger(__name__)
post_service = PostService()
account_service = AccountService()

POST_USAGE = (
    "📝 New post:\n"
    "/post category | content\n"
    "/post category | content | image URL | link URL | link title\n\n"
    f"Categories: {', '.join(CATEGORIES)}\n"
    "Emergency posts are pinned above everything else.\n\n"
    "Example:\n"
    "/post emergency | School is closed today due to flooding."
)


@rate_limited
@reply_on_error
@school_only
async def post_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /post - publish an announcement (school accounts only).

    Usage:
        /post category | content [| image_url | link_url | link_title]
    """
    parts = split_fields(" ".join(context.args or []))
    if len(parts) < 2:
        await update.message.reply_text(POST_USAGE)
        return

    author = get_session(context).account
    post = post_service.publish(
        author,
        content=parts[1],
        category=parts[0],
        image_url=optional_field(parts, 2),
        link_url=optional_field(parts, 3),
        link_title=optional_field(parts, 4),
    )
    await update.message.reply_text(f"✅ Published!\n\n{format_post(post)}")


@rate_limited
@reply_on_error
async def feed_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /feed [category].

    Parents/students see the schools they follow; schools and visitors
    who are not logged in see every post.
    """
    viewer = get_session(context).account
    category = context.args[0].lower() if context.args else None
    posts = post_service.list_posts_for_viewer(viewer, category)

    if viewer is not None and not viewer.is_school():
        empty = (
            "📭 No posts in this category yet." if category
            else "📭 Your feed is empty. Follow schools with /schools to see their updates."
        )
    else:
        empty = "📭 No posts yet."
    await update.message.reply_text(format_posts(posts, FEED_PAGE_SIZE, empty))


@rate_limited
@reply_on_error
async def school_posts_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /posts <school_id> - everything one school has published."""
    if not context.args:
        await update.message.reply_text("⚠️ Usage: /posts <school id>")
        return

    school = account_service.get_school(context.args[0])
    posts = post_service.list_posts_by_school(school.id)
    header = f"🏫 {school.display_name}\n\n"
    await update.message.reply_text(
        header + format_posts(posts, FEED_PAGE_SIZE, "📭 No posts yet.")
    )


@rate_limited
@reply_on_error
@login_required
async def saved_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /saved - posts the user bookmarked."""
    account_id = get_session(context).account_id
    posts = post_service.list_saved_posts(account_id)
    await update.message.reply_text(
        format_posts(posts, FEED_PAGE_SIZE, "🔖 No saved posts yet. Save one with /save <post id>.")
    )

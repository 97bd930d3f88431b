"""
handlers/start_handler.py
--------------------------
Handles /start and /help commands.
Greets the user and shows available commands.
"""

from telegram import Update
from telegram.ext import ContextTypes

from security.rate_limiter import rate_limited
from security.session import get_session
from utils.logger import get_logger

logger = get_logger(__name__)

HELP_TEXT = """
🎓 *Welcome to SchoolPost!*
Official updates from your schools, in one feed.

*👤 Account:*
/signup - Parent/student account
/signup\\_school - Register a school
/login - Log in (email and password)
/logout - Log out
/me - Your profile
/edit - Edit your profile

*📰 Reading:*
/feed - Your feed (add a category: notice, exam, event, holiday, emergency)
/schools - Find schools by name or city
/posts - A school's posts
/saved - Your saved posts

*🤝 Following & reactions:*
/follow, /unfollow - Follow a school by id
/following - Schools you follow
/like, /unlike - Like a post by id
/save, /unsave - Bookmark a post by id

*🏫 Schools:*
/post - Publish an announcement
"""


@rate_limited
async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - greet and point to signup or the feed."""
    user = update.effective_user
    session = get_session(context)
    logger.info(f"Telegram user {user.id} started the bot.")

    if session.is_authenticated:
        greeting = (
            f"Welcome back, {session.account.display_name}! 👋\n"
            f"Your latest updates are in /feed."
        )
    else:
        greeting = (
            f"Hello {user.first_name}! 👋\n"
            f"SchoolPost brings announcements from your schools to Telegram.\n\n"
            f"New here? /signup (parents and students) or /signup_school.\n"
            f"Already registered? /login"
        )
    await update.message.reply_text(greeting + "\n\nType /help to see all commands.")


@rate_limited
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show all available commands."""
    await update.message.reply_text(HELP_TEXT, parse_mode="Markdown")

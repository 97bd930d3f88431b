"""
main.py
-------
Entry point for the SchoolPost Telegram bot.

Responsibilities:
    - Initialize the document store (and the database schema for PostgreSQL).
    - Configure per-user session persistence.
    - Configure and start the Telegram bot with all handlers.
"""

from telegram import BotCommand
from telegram.ext import Application, CommandHandler, PicklePersistence

from config import SESSION_FILE, STORE_BACKEND, TELEGRAM_BOT_TOKEN
from db.store import close_store, init_store
from handlers.auth_handler import (
    login_command,
    logout_command,
    signup_command,
    signup_school_command,
)
from handlers.engagement_handler import (
    like_command,
    save_command,
    unlike_command,
    unsave_command,
)
from handlers.post_handler import (
    feed_command,
    post_command,
    saved_command,
    school_posts_command,
)
from handlers.profile_handler import edit_command, me_command
from handlers.school_handler import (
    follow_command,
    following_command,
    schools_command,
    unfollow_command,
)
from handlers.start_handler import help_command, start_command
from utils.logger import get_logger

logger = get_logger(__name__)

COMMANDS = [
    ("start", start_command, "🚀 Start the bot"),
    ("help", help_command, "📖 Show help"),
    ("signup", signup_command, "👪 Create a parent/student account"),
    ("signup_school", signup_school_command, "🏫 Register a school"),
    ("login", login_command, "🔑 Log in"),
    ("logout", logout_command, "👋 Log out"),
    ("me", me_command, "👤 Your profile"),
    ("edit", edit_command, "✏️ Edit your profile"),
    ("feed", feed_command, "📰 Your feed"),
    ("post", post_command, "📝 Publish an announcement"),
    ("posts", school_posts_command, "🏫 A school's posts"),
    ("saved", saved_command, "🔖 Saved posts"),
    ("schools", schools_command, "🔍 Find schools"),
    ("follow", follow_command, "➕ Follow a school"),
    ("unfollow", unfollow_command, "➖ Unfollow a school"),
    ("following", following_command, "🤝 Schools you follow"),
    ("like", like_command, "❤️ Like a post"),
    ("unlike", unlike_command, "💔 Remove a like"),
    ("save", save_command, "🔖 Save a post"),
    ("unsave", unsave_command, "🗑️ Remove a saved post"),
]


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    await application.bot.set_my_commands(
        [BotCommand(name, description) for name, _, description in COMMANDS]
    )
    logger.info("Bot commands menu registered successfully.")


def build_application() -> Application:
    """Build the Telegram application with persistence and every command handler."""
    builder = Application.builder().token(TELEGRAM_BOT_TOKEN).post_init(set_bot_commands)
    if SESSION_FILE:
        builder = builder.persistence(PicklePersistence(filepath=SESSION_FILE))
        logger.info(f"Sessions persisted to {SESSION_FILE}")
    app = builder.build()

    for name, callback, _ in COMMANDS:
        app.add_handler(CommandHandler(name, callback))
    return app


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Store setup ────────────────────────────────────
    logger.info(f"Initializing {STORE_BACKEND} document store...")
    init_store()
    if STORE_BACKEND == "postgres":
        from db.init_db import create_tables
        create_tables()

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = build_application()

    # ── 3. Start polling ──────────────────────────────────
    logger.info("🚀 SchoolPost is running! Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True, allowed_updates=["message"])

    # ── 4. Cleanup on shutdown ────────────────────────────
    close_store()
    logger.info("SchoolPost stopped.")


if __name__ == "__main__":
    main()

"""
Command handlers driven with fake Updates against the in-memory store.
"""

import pytest

import handlers.post_handler as post_handler
import security.rate_limiter as rate_limiter
from handlers.auth_handler import login_command, logout_command, signup_command, signup_school_command
from handlers.engagement_handler import like_command, save_command, unlike_command
from handlers.post_handler import feed_command, post_command, saved_command
from handlers.profile_handler import edit_command, me_command
from handlers.school_handler import follow_command, following_command, schools_command
from handlers.start_handler import start_command
from security.auth import LOGIN_REQUIRED_TEXT, SCHOOL_ONLY_TEXT
from security.rate_limiter import RATE_LIMITED_TEXT, RateLimiter
from security.session import get_session
from utils.errors import InvalidCredentialsError, StoreError

SCHOOL_SIGNUP = "Greenwood High | office@greenwood.edu | s3cret | Pune | 12 MG Road"
USER_SIGNUP = "Alice | alice@example.com | pa55word | Pune"


def words(text: str) -> list[str]:
    return text.split()


@pytest.fixture
async def school_ctx(make_update, make_context):
    ctx = make_context(*words(SCHOOL_SIGNUP))
    await signup_school_command(make_update(user_id=1), ctx)
    return ctx


@pytest.fixture
async def user_ctx(make_update, make_context):
    ctx = make_context(*words(USER_SIGNUP))
    await signup_command(make_update(user_id=2), ctx)
    return ctx


async def run(handler, update, ctx, *args):
    ctx.args = list(args)
    await handler(update, ctx)
    return update.replies[-1]


# ── auth ──────────────────────────────────────────────────


async def test_signup_starts_session_and_deletes_password_message(make_update, make_context):
    update = make_update()
    ctx = make_context(*words(USER_SIGNUP))

    await signup_command(update, ctx)

    update.message.delete.assert_awaited_once()
    session = get_session(ctx)
    assert session.is_authenticated
    assert session.account.email == "alice@example.com"
    assert "Welcome to SchoolPost, Alice" in update.replies[-1]


async def test_signup_with_too_few_fields_shows_usage(make_update, make_context):
    update = make_update()
    await signup_command(update, make_context("Alice", "|", "alice@example.com"))
    assert update.replies[-1].startswith("👪 Create a parent/student account")
    update.message.delete.assert_not_awaited()


async def test_incomplete_signup_with_password_is_still_deleted(make_update, make_context):
    update = make_update()
    await signup_command(update, make_context(*words("Alice | alice@example.com | pa55word")))

    update.message.delete.assert_awaited_once()
    assert update.replies[-1].startswith("👪 Create a parent/student account")


async def test_incomplete_school_signup_with_password_is_still_deleted(make_update, make_context):
    update = make_update()
    await signup_school_command(update, make_context(*words("Greenwood | office@greenwood.edu | s3cret | Pune")))

    update.message.delete.assert_awaited_once()
    assert update.replies[-1].startswith("🏫 Register a school")


async def test_duplicate_signup_is_reported(user_ctx, make_update, make_context):
    update = make_update(user_id=3)
    await signup_command(update, make_context(*words(USER_SIGNUP)))
    assert "already exists" in update.replies[-1]


async def test_login_and_logout(user_ctx, make_update, make_context):
    ctx = make_context()
    update = make_update(user_id=9)

    reply = await run(login_command, update, ctx, "alice@example.com", "pa55word")
    assert "Welcome back, Alice" in reply
    assert get_session(ctx).is_authenticated

    reply = await run(logout_command, update, ctx)
    assert reply == "👋 Logged out."
    assert not get_session(ctx).is_authenticated


async def test_login_with_wrong_password(user_ctx, make_update, make_context):
    update = make_update(user_id=9)
    ctx = make_context()
    reply = await run(login_command, update, ctx, "alice@example.com", "nope")

    assert reply == InvalidCredentialsError.user_message
    update.message.delete.assert_awaited_once()
    assert not get_session(ctx).is_authenticated


# ── posting and reading ───────────────────────────────────


async def test_school_posts_and_follower_reads_feed(school_ctx, user_ctx, make_update):
    school_update = make_update(user_id=1)
    reply = await run(post_command, school_update, school_ctx, *words("emergency | Closed today"))
    assert reply.startswith("✅ Published!")

    user_update = make_update(user_id=2)
    reply = await run(feed_command, user_update, user_ctx)
    assert "Follow schools" in reply

    school_id = get_session(school_ctx).account_id
    reply = await run(follow_command, user_update, user_ctx, school_id)
    assert reply.startswith("✅ Following Greenwood High")

    reply = await run(feed_command, user_update, user_ctx)
    assert "🚨 EMERGENCY" in reply
    assert "Closed today" in reply

    reply = await run(following_command, user_update, user_ctx)
    assert "Greenwood High" in reply
    assert "1 followers" in reply


async def test_users_cannot_post(user_ctx, make_update):
    reply = await run(post_command, make_update(user_id=2), user_ctx, *words("notice | Hi"))
    assert reply == SCHOOL_ONLY_TEXT


async def test_post_with_unknown_category_is_rejected(school_ctx, make_update):
    reply = await run(post_command, make_update(user_id=1), school_ctx, *words("gossip | Hi"))
    assert "Unknown category 'gossip'" in reply


async def test_anonymous_feed_shows_everything(school_ctx, make_update, make_context):
    await run(post_command, make_update(user_id=1), school_ctx, *words("notice | PTA meeting"))
    reply = await run(feed_command, make_update(user_id=5), make_context())
    assert "PTA meeting" in reply


async def test_like_save_and_saved(school_ctx, user_ctx, make_update):
    await run(post_command, make_update(user_id=1), school_ctx, *words("exam | Timetable out"))
    school_id = get_session(school_ctx).account_id
    post_id = post_handler.post_service.list_posts_by_school(school_id)[0].id
    update = make_update(user_id=2)

    assert await run(like_command, update, user_ctx, f"#{post_id}") == "❤️ Liked. This post now has 1 likes."
    assert await run(unlike_command, update, user_ctx, post_id) == "💔 Like removed. This post now has 0 likes."

    await run(save_command, update, user_ctx, post_id)
    reply = await run(saved_command, update, user_ctx)
    assert "Timetable out" in reply


async def test_like_unknown_post(user_ctx, make_update):
    reply = await run(like_command, make_update(user_id=2), user_ctx, "missing")
    assert reply == "No post with id missing."


# ── profile and discovery ─────────────────────────────────


async def test_me_and_edit(school_ctx, make_update):
    update = make_update(user_id=1)
    reply = await run(edit_command, update, school_ctx, "phone", "020-5550100")
    assert "☎️ 020-5550100" in reply

    reply = await run(me_command, update, school_ctx)
    assert "Greenwood High (school)" in reply
    assert "☎️ 020-5550100" in reply


async def test_users_cannot_edit_school_fields(user_ctx, make_update):
    reply = await run(edit_command, make_update(user_id=2), user_ctx, "website", "https://x")
    assert reply.startswith("Can't edit 'website'")


async def test_schools_search_marks_followed(school_ctx, user_ctx, make_update):
    update = make_update(user_id=2)
    await run(follow_command, update, user_ctx, get_session(school_ctx).account_id)

    reply = await run(schools_command, update, user_ctx, "pune")
    assert "Greenwood High" in reply
    assert "✅ following" in reply

    reply = await run(schools_command, update, user_ctx, "atlantis")
    assert reply == "🔍 No schools match that search."


# ── guards ────────────────────────────────────────────────


async def test_follow_requires_login(make_update, make_context):
    reply = await run(follow_command, make_update(), make_context(), "anything")
    assert reply == LOGIN_REQUIRED_TEXT


async def test_rate_limit(monkeypatch, make_update, make_context):
    monkeypatch.setattr(rate_limiter, "limiter", RateLimiter(limit=1, window=60))
    update = make_update()
    ctx = make_context()

    await start_command(update, ctx)
    assert "Hello Alice" in update.replies[-1]
    await start_command(update, ctx)
    assert update.replies[-1] == RATE_LIMITED_TEXT


async def test_store_failure_is_reported_without_details(monkeypatch, make_update, make_context):
    def broken(*args, **kwargs):
        raise StoreError("connection refused by 10.0.0.5")

    monkeypatch.setattr(post_handler.post_service, "list_posts_for_viewer", broken)
    reply = await run(feed_command, make_update(), make_context())
    assert reply == StoreError.user_message

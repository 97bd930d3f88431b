from types import SimpleNamespace

from models.account import ROLE_USER, Account
from security.passwords import hash_password, verify_password
from security.rate_limiter import RateLimiter
from security.session import end_session, get_session, refresh_session, start_session


def context():
    return SimpleNamespace(user_data={})


def account(**overrides):
    values = dict(id="u1", name="Alice", email="alice@example.com", password="hash", role=ROLE_USER)
    values.update(overrides)
    return Account(**values)


# ── passwords ─────────────────────────────────────────────


def test_hash_is_salted_and_verifies():
    first = hash_password("s3cret")
    second = hash_password("s3cret")
    assert first != second
    assert verify_password("s3cret", first)
    assert not verify_password("S3cret", first)


def test_verify_rejects_missing_or_malformed_hash():
    assert not verify_password("s3cret", None)
    assert not verify_password("s3cret", "")
    assert not verify_password("s3cret", "s3cret")


# ── session ───────────────────────────────────────────────


def test_new_session_is_anonymous():
    session = get_session(context())
    assert not session.is_authenticated
    assert session.account_id is None


def test_start_session_hides_password():
    ctx = context()
    start_session(ctx, account())
    session = get_session(ctx)
    assert session.is_authenticated
    assert session.account_id == "u1"
    assert session.account.password == ""


def test_refresh_only_replaces_the_same_account():
    ctx = context()
    start_session(ctx, account())

    refresh_session(ctx, account(id="someone-else", name="Mallory"))
    assert get_session(ctx).account.name == "Alice"

    refresh_session(ctx, account(name="Alice R."))
    assert get_session(ctx).account.name == "Alice R."


def test_end_session_logs_out():
    ctx = context()
    start_session(ctx, account())
    assert end_session(ctx).id == "u1"
    assert not get_session(ctx).is_authenticated
    assert end_session(ctx) is None


# ── rate limiting ─────────────────────────────────────────


def test_rate_limiter_window_slides():
    now = {"t": 0.0}
    limiter = RateLimiter(limit=2, window=10, clock=lambda: now["t"])

    assert limiter.allow(1)
    assert limiter.allow(1)
    assert not limiter.allow(1)
    assert limiter.allow(2)

    now["t"] = 10.0
    assert limiter.allow(1)


def test_rate_limiter_reset():
    limiter = RateLimiter(limit=1, window=60, clock=lambda: 0.0)
    assert limiter.allow(1)
    assert not limiter.allow(1)
    limiter.reset()
    assert limiter.allow(1)

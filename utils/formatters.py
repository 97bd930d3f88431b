"""
utils/formatters.py
-------------------
Plain-text renderings of accounts and posts for bot replies.
User-provided text is never sent with a parse mode, so nothing here escapes.
"""

from typing import Optional

from models.account import Account
from models.post import Post

CATEGORY_ICONS = {
    "notice": "📌",
    "exam": "📝",
    "event": "🎉",
    "holiday": "🏖️",
    "emergency": "🚨",
}


def format_post(post: Post, liked: Optional[bool] = None, saved: Optional[bool] = None) -> str:
    icon = CATEGORY_ICONS.get(post.category, "•")
    when = post.created_at.strftime("%Y-%m-%d %H:%M") if post.created_at else ""
    lines = [f"{icon} {post.category.upper()} · {post.school_name} · {when}", post.content]
    if post.image_url:
        lines.append(f"🖼️ {post.image_url}")
    if post.link_url:
        lines.append(f"🔗 {post.link_title or post.link_url}: {post.link_url}")

    footer = f"❤️ {post.likes}"
    if liked:
        footer += " (you)"
    if saved:
        footer += " · 🔖 saved"
    lines.append(f"{footer} · #{post.id}")
    return "\n".join(lines)


def format_posts(posts: list[Post], limit: int, empty_text: str) -> str:
    if not posts:
        return empty_text
    shown = [format_post(post) for post in posts[:limit]]
    text = "\n\n".join(shown)
    if len(posts) > limit:
        text += f"\n\n… and {len(posts) - limit} more."
    return text


def format_school(school: Account, following: Optional[bool] = None) -> str:
    place = ", ".join(part for part in (school.city, school.state) if part)
    line = f"🏫 {school.display_name}"
    if place:
        line += f" · 📍 {place}"
    line += f"\n   👥 {school.followers_count} followers · 📰 {school.posts_count} posts · #{school.id}"
    if following:
        line += " · ✅ following"
    return line


def format_profile(account: Account) -> str:
    lines = [
        f"👤 {account.display_name} ({account.role})",
        f"✉️ {account.email}",
    ]
    place = ", ".join(part for part in (account.city, account.state) if part)
    if place:
        lines.append(f"📍 {place}")
    if account.is_school():
        if account.address:
            lines.append(f"🏠 {account.address}")
        if account.phone:
            lines.append(f"☎️ {account.phone}")
        if account.website:
            lines.append(f"🌐 {account.website}")
        lines.append(f"👥 {account.followers_count} followers · 📰 {account.posts_count} posts")
    if account.profile_photo_url:
        lines.append(f"🖼️ {account.profile_photo_url}")
    lines.append(f"🆔 {account.id}")
    return "\n".join(lines)

"""
startupconnect.engine.content — Post, Comment & Message Text Rules
====================================================================

Validation for member-authored content.  Each function returns the
normalized value to store or raises the matching domain error before
anything touches the database.
"""

from __future__ import annotations

import uuid

from pydantic import HttpUrl, TypeAdapter, ValidationError

from startupconnect.constants import (
    COMMUNITY_DESCRIPTION_MAX,
    COMMUNITY_DESCRIPTION_MIN,
    COMMUNITY_NAME_MAX,
    COMMUNITY_NAME_MIN,
    INDUSTRIES,
    MAX_POST_LENGTH,
)
from startupconnect.errors import EmptyComment, EmptyMessage, InvalidCommunity, InvalidPost

_url_adapter: TypeAdapter[HttpUrl] = TypeAdapter(HttpUrl)


def new_id() -> str:
    """Fresh public identifier for posts, comments, communities and chats."""
    return uuid.uuid4().hex


def validate_post_text(text: str) -> str:
    """Strip *text* and check it is non-empty and within the length bound."""
    content = (text or "").strip()
    if not content:
        raise InvalidPost("content", "Post content cannot be empty.")
    if len(content) > MAX_POST_LENGTH:
        raise InvalidPost(
            "content",
            f"Post content is too long ({len(content)} > {MAX_POST_LENGTH} characters).",
        )
    return content


def validate_image_url(image_url: str | None) -> str | None:
    """Return a well-formed absolute http(s) URL, or ``None`` for no image.

    The empty string means "no image", as sent by an untouched form field.
    """
    if image_url is None or not image_url.strip():
        return None
    try:
        return str(_url_adapter.validate_python(image_url.strip()))
    except ValidationError:
        raise InvalidPost("image_url", "Image URL must be a valid http(s) URL.") from None


def normalize_comment(text: str) -> str:
    content = (text or "").strip()
    if not content:
        raise EmptyComment()
    return content


def normalize_message(text: str) -> str:
    content = (text or "").strip()
    if not content:
        raise EmptyMessage()
    return content


def validate_community(name: str, description: str, industry: str) -> tuple[str, str, str]:
    """Check a new community's fields; returns the stripped values."""
    name = (name or "").strip()
    description = (description or "").strip()
    if not COMMUNITY_NAME_MIN <= len(name) <= COMMUNITY_NAME_MAX:
        raise InvalidCommunity(
            "name",
            f"Community name must be {COMMUNITY_NAME_MIN}-{COMMUNITY_NAME_MAX} characters.",
        )
    if not COMMUNITY_DESCRIPTION_MIN <= len(description) <= COMMUNITY_DESCRIPTION_MAX:
        raise InvalidCommunity(
            "description",
            f"Description must be {COMMUNITY_DESCRIPTION_MIN}-{COMMUNITY_DESCRIPTION_MAX} characters.",
        )
    if industry not in INDUSTRIES:
        raise InvalidCommunity("industry", "Please select a valid industry.")
    return name, description, industry

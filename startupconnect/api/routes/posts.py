"""
startupconnect.api.routes.posts — Feed, likes & comments
==========================================================
"""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from startupconnect.api.deps import CurrentUser, EngineDep, get_config
from startupconnect.config import AppConfig
from startupconnect.database.engine import run_db
from startupconnect.services import engagement_service
from startupconnect.services.engagement_service import PostView

router = APIRouter(prefix="/posts", tags=["posts"])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class NewPost(BaseModel):
    content: str
    image_url: str | None = None


class NewComment(BaseModel):
    content: str


def post_dict(post: PostView) -> dict:
    body = asdict(post)
    body["like_count"] = post.like_count
    body["comment_count"] = len(post.comments)
    return body


# ---------------------------------------------------------------------------
# GET /posts
# ---------------------------------------------------------------------------
@router.get("")
def list_posts(
    engine: EngineDep,
    cfg: AppConfig = Depends(get_config),
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1, le=100),
    author: str | None = None,
):
    """The feed, newest first."""
    size = page_size or cfg.feed_page_size
    posts = engagement_service.list_posts(
        engine, limit=size, offset=(page - 1) * size, author_id=author
    )
    return {
        "page": page,
        "page_size": size,
        "posts": [post_dict(p) for p in posts],
    }


@router.get("/{post_id}")
def get_post(post_id: str, engine: EngineDep):
    return post_dict(engagement_service.get_post(engine, post_id))


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------
@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(body: NewPost, user_id: CurrentUser, engine: EngineDep):
    post = await run_db(
        engagement_service.create_post, engine, user_id, body.content, body.image_url
    )
    return post_dict(post)


@router.post("/{post_id}/like")
async def toggle_like(post_id: str, user_id: CurrentUser, engine: EngineDep):
    result = await run_db(engagement_service.toggle_like, engine, post_id, user_id)
    return asdict(result)


@router.post("/{post_id}/comments", status_code=status.HTTP_201_CREATED)
async def add_comment(post_id: str, body: NewComment, user_id: CurrentUser, engine: EngineDep):
    comment = await run_db(engagement_service.add_comment, engine, post_id, user_id, body.content)
    return asdict(comment)

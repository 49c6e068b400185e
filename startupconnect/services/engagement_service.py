"""
startupconnect.services.engagement_service — Posts, Likes & Comments
======================================================================

Every mutation of a post is one transaction that

    1. locks the post row (``SELECT … FOR UPDATE``),
    2. reads the current liker set / comment count,
    3. writes the change plus the post's new counters,
    4. commits; the post UPDATE carries ``WHERE version = <read version>``.

Step 1 serializes writers on the same post where the database supports row
locks; step 4 turns any writer that still read a stale version into a
:class:`~startupconnect.errors.WriteConflict` instead of a lost update.
Posts on different posts never contend.

Feed order is ``created_at`` descending, ties broken by insertion sequence
(``seq``) descending.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from startupconnect.database.engine import store_errors
from startupconnect.database.models import Post, PostComment, PostLike
from startupconnect.engine.content import (
    new_id,
    normalize_comment,
    validate_image_url,
    validate_post_text,
)
from startupconnect.errors import PostNotFound
from startupconnect.services.relationship_service import require_users

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class CommentView:
    id: str
    post_id: str
    author_id: str
    content: str
    position: int
    created_at: datetime


@dataclass(frozen=True, slots=True)
class PostView:
    id: str
    author_id: str
    content: str
    image_url: str | None
    created_at: datetime
    seq: int
    likes: list[str] = field(default_factory=list)
    comments: list[CommentView] = field(default_factory=list)

    @property
    def like_count(self) -> int:
        return len(self.likes)


@dataclass(frozen=True, slots=True)
class LikeResult:
    post_id: str
    like_count: int
    liked: bool


def _now() -> datetime:
    return datetime.now(UTC)


def _comment_view(c: PostComment) -> CommentView:
    return CommentView(
        id=c.id,
        post_id=c.post_id,
        author_id=c.author_id,
        content=c.content,
        position=c.position,
        created_at=c.created_at,
    )


def hydrate_posts(session: Session, posts: list[Post]) -> list[PostView]:
    """Attach likers and comments to *posts* with two batched queries."""
    if not posts:
        return []
    ids = [p.id for p in posts]

    likers: dict[str, list[str]] = defaultdict(list)
    for like in session.scalars(
        select(PostLike)
        .where(PostLike.post_id.in_(ids))
        .order_by(PostLike.created_at, PostLike.user_id)
    ):
        likers[like.post_id].append(like.user_id)

    comments: dict[str, list[CommentView]] = defaultdict(list)
    for comment in session.scalars(
        select(PostComment)
        .where(PostComment.post_id.in_(ids))
        .order_by(PostComment.post_id, PostComment.position)
    ):
        comments[comment.post_id].append(_comment_view(comment))

    return [
        PostView(
            id=p.id,
            author_id=p.author_id,
            content=p.content,
            image_url=p.image_url,
            created_at=p.created_at,
            seq=p.seq,
            likes=likers[p.id],
            comments=comments[p.id],
        )
        for p in posts
    ]


def _lock_post(session: Session, post_id: str) -> Post:
    post = session.scalars(
        select(Post).where(Post.id == post_id).with_for_update()
    ).first()
    if post is None:
        raise PostNotFound(f"Post {post_id!r} not found.")
    return post


def _feed_order():
    return (Post.created_at.desc(), Post.seq.desc())


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------
@store_errors()
def create_post(
    engine: Engine,
    author_id: str,
    text: str,
    image_url: str | None = None,
) -> PostView:
    """Publish a post with an empty liker set and no comments.

    Raises ``InvalidPost`` (field ``content`` or ``image_url``) or
    ``UserNotFound``.
    """
    content = validate_post_text(text)
    image = validate_image_url(image_url)

    with Session(engine, expire_on_commit=False) as session:
        require_users(session, author_id)
        post = Post(
            id=new_id(),
            author_id=author_id,
            content=content,
            image_url=image,
            created_at=_now(),
        )
        session.add(post)
        session.commit()

    logger.info("Post %s created by %s (seq=%d)", post.id, author_id, post.seq)
    return PostView(
        id=post.id,
        author_id=post.author_id,
        content=post.content,
        image_url=post.image_url,
        created_at=post.created_at,
        seq=post.seq,
    )


@store_errors()
def toggle_like(engine: Engine, post_id: str, user_id: str) -> LikeResult:
    """Like the post if *user_id* hasn't, otherwise unlike it.

    Never fails on repetition: two calls in a row restore the original
    membership and count.
    """
    with Session(engine) as session:
        post = _lock_post(session, post_id)
        existing = session.get(PostLike, (post_id, user_id))
        if existing is not None:
            session.delete(existing)
            post.like_count = max(0, post.like_count - 1)
            liked = False
        else:
            require_users(session, user_id)
            session.add(PostLike(post_id=post_id, user_id=user_id, created_at=_now()))
            post.like_count += 1
            liked = True
        like_count = post.like_count
        session.commit()

    logger.debug("Post %s %s by %s → %d likes",
                 post_id, "liked" if liked else "unliked", user_id, like_count)
    return LikeResult(post_id=post_id, like_count=like_count, liked=liked)


@store_errors()
def add_comment(engine: Engine, post_id: str, author_id: str, text: str) -> CommentView:
    """Append a comment; its position is the post's next comment slot.

    Raises ``EmptyComment`` when *text* is blank after stripping.
    """
    content = normalize_comment(text)

    with Session(engine) as session:
        post = _lock_post(session, post_id)
        require_users(session, author_id)
        post.comment_count += 1
        comment = PostComment(
            id=new_id(),
            post_id=post_id,
            position=post.comment_count,
            author_id=author_id,
            content=content,
            created_at=_now(),
        )
        session.add(comment)
        session.flush()
        view = _comment_view(comment)
        session.commit()

    logger.debug("Comment %s appended to post %s at position %d",
                 view.id, post_id, view.position)
    return view


@store_errors()
def get_post(engine: Engine, post_id: str) -> PostView:
    with Session(engine) as session:
        post = session.scalars(select(Post).where(Post.id == post_id)).first()
        if post is None:
            raise PostNotFound(f"Post {post_id!r} not found.")
        return hydrate_posts(session, [post])[0]


@store_errors()
def list_posts(
    engine: Engine,
    *,
    limit: int | None = None,
    offset: int = 0,
    author_id: str | None = None,
) -> list[PostView]:
    """Posts newest first, optionally for one author and one page."""
    query = select(Post).order_by(*_feed_order())
    if author_id is not None:
        query = query.where(Post.author_id == author_id)
    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)

    with Session(engine) as session:
        return hydrate_posts(session, list(session.scalars(query)))


def iter_posts(engine: Engine, page_size: int = DEFAULT_PAGE_SIZE) -> Iterator[PostView]:
    """Lazily walk the whole feed, newest first, one page per query.

    Pages are chained on the last seen ``(created_at, seq)`` key, so posts
    inserted while iterating never shift later pages.  Call again to restart.
    """
    if page_size < 1:
        raise ValueError("page_size must be positive")

    cursor: tuple[datetime, int] | None = None
    while True:
        query = select(Post).order_by(*_feed_order()).limit(page_size)
        if cursor is not None:
            created_at, seq = cursor
            query = query.where(
                or_(
                    Post.created_at < created_at,
                    and_(Post.created_at == created_at, Post.seq < seq),
                )
            )
        with store_errors(), Session(engine) as session:
            page = hydrate_posts(session, list(session.scalars(query)))

        yield from page
        if len(page) < page_size:
            return
        cursor = (page[-1].created_at, page[-1].seq)

"""
startupconnect.database.models — SQLAlchemy 2.0 Data Models
=============================================================

Tables:
- users               — Member identity + role-tagged profile (JSONB)
- connection_edges    — One row per unordered user pair: pending or connected
- posts               — Feed posts with an optimistic-lock version counter
- post_likes          — Liker set (composite PK → no duplicate likes)
- post_comments       — Append-only comments with a per-post position
- communities         — Industry communities
- community_members   — Community membership set
- chats               — Direct (one per connected pair) and group chats
- chat_participants   — Chat membership
- messages            — Chat messages, ordered by insertion
"""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all StartupConnect ORM models."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class UserRole(enum.StrEnum):
    """The four member roles offered at signup."""
    FOUNDER = "Startup Founder"
    ANGEL_INVESTOR = "Angel Investor"
    VENTURE_CAPITALIST = "Venture Capitalist"
    INDUSTRY_EXPERT = "Industry Expert"


class EdgeState(enum.StrEnum):
    """Stored state of a connection_edges row."""
    PENDING = "pending"
    CONNECTED = "connected"


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    profile: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    posts: Mapped[list[Post]] = relationship(back_populates="author")

    __table_args__ = (
        Index("ix_users_role", "role"),
    )

    def __repr__(self) -> str:
        return f"<User id={self.id!r} name={self.name!r} role={self.role!r}>"


# ---------------------------------------------------------------------------
# Connection edges (one row per unordered pair)
# ---------------------------------------------------------------------------
class ConnectionEdge(Base):
    """Pending request or accepted connection between two users.

    The primary key is the pair in canonical order (``user_low < user_high``),
    so the database itself guarantees at most one edge per pair.  For a
    pending edge ``requester_id`` is the sender and ``addressee_id`` the
    recipient; once connected the direction is kept for history only.
    """
    __tablename__ = "connection_edges"

    user_low: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    user_high: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    requester_id: Mapped[str] = mapped_column(String(64), nullable=False)
    addressee_id: Mapped[str] = mapped_column(String(64), nullable=False)
    state: Mapped[str] = mapped_column(String(16), nullable=False, default=EdgeState.PENDING.value)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("user_low < user_high", name="ck_connection_edges_ordered"),
        Index("ix_connection_edges_requester", "requester_id", "state"),
        Index("ix_connection_edges_addressee", "addressee_id", "state"),
    )

    def __repr__(self) -> str:
        return (
            f"<ConnectionEdge {self.requester_id!r}->{self.addressee_id!r} "
            f"state={self.state}>"
        )


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------
class Post(Base):
    """A feed post.

    ``seq`` is the insertion sequence used as the feed tie-breaker; ``id`` is
    the public identifier.  ``version`` is SQLAlchemy's optimistic-lock
    counter: every UPDATE is issued as ``… WHERE version = <read version>``.
    """
    __tablename__ = "posts"

    seq: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    id: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    author_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(2048), default=None)
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    author: Mapped[User] = relationship(back_populates="posts")
    likes: Mapped[list[PostLike]] = relationship(
        back_populates="post", cascade="all, delete-orphan"
    )
    comments: Mapped[list[PostComment]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostComment.position",
    )

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("ix_posts_feed", "created_at", "seq"),
        Index("ix_posts_author", "author_id"),
    )

    def __repr__(self) -> str:
        return f"<Post id={self.id!r} author={self.author_id!r} v={self.version}>"


class PostLike(Base):
    __tablename__ = "post_likes"

    post_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    post: Mapped[Post] = relationship(back_populates="likes")


class PostComment(Base):
    """Immutable comment; ``position`` is its 1-based index on the post."""
    __tablename__ = "post_comments"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    post_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    author_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    post: Mapped[Post] = relationship(back_populates="comments")

    __table_args__ = (
        UniqueConstraint("post_id", "position", name="uq_post_comments_position"),
    )


# ---------------------------------------------------------------------------
# Communities
# ---------------------------------------------------------------------------
class Community(Base):
    __tablename__ = "communities"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    industry: Mapped[str] = mapped_column(String(32), nullable=False)
    creator_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="SET NULL"), default=None
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    members: Mapped[list[CommunityMember]] = relationship(
        back_populates="community", cascade="all, delete-orphan"
    )

    __table_args__ = (
        UniqueConstraint("name", name="uq_communities_name"),
    )

    def __repr__(self) -> str:
        return f"<Community id={self.id!r} name={self.name!r}>"


class CommunityMember(Base):
    __tablename__ = "community_members"

    community_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("communities.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    community: Mapped[Community] = relationship(back_populates="members")


# ---------------------------------------------------------------------------
# Messaging
# ---------------------------------------------------------------------------
class Chat(Base):
    """A conversation.

    Direct chats carry ``pair_key`` (``"<low>:<high>"``), unique across the
    table so two users never end up with two direct chats.
    """
    __tablename__ = "chats"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    is_group: Mapped[bool] = mapped_column(Boolean, default=False)
    group_name: Mapped[str | None] = mapped_column(String(100), default=None)
    pair_key: Mapped[str | None] = mapped_column(String(140), default=None, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    last_message_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )

    participants: Mapped[list[ChatParticipant]] = relationship(
        back_populates="chat", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Chat id={self.id!r} group={self.is_group}>"


class ChatParticipant(Base):
    __tablename__ = "chat_participants"

    chat_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("chats.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )

    chat: Mapped[Chat] = relationship(back_populates="participants")

    __table_args__ = (
        Index("ix_chat_participants_user", "user_id"),
    )


class Message(Base):
    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    chat_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("chats.id", ondelete="CASCADE"), nullable=False
    )
    sender_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_messages_chat", "chat_id", "id"),
    )

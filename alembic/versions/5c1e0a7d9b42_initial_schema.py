"""Initial schema: users, connection graph, posts, communities, chats

Revision ID: 5c1e0a7d9b42
Revises:
Create Date: 2026-10-18 10:12:31.118402

"""
from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '5c1e0a7d9b42'
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create every table of the StartupConnect schema."""

    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("role", sa.String(32), nullable=False),
        sa.Column("profile", postgresql.JSONB, nullable=False, server_default="{}"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_users_role", "users", ["role"])

    # --- connection_edges ---
    op.create_table(
        "connection_edges",
        sa.Column("user_low", sa.String(64),
                  sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("user_high", sa.String(64),
                  sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("requester_id", sa.String(64), nullable=False),
        sa.Column("addressee_id", sa.String(64), nullable=False),
        sa.Column("state", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("user_low < user_high", name="ck_connection_edges_ordered"),
    )
    op.create_index(
        "ix_connection_edges_requester", "connection_edges", ["requester_id", "state"]
    )
    op.create_index(
        "ix_connection_edges_addressee", "connection_edges", ["addressee_id", "state"]
    )

    # --- posts ---
    op.create_table(
        "posts",
        sa.Column("seq", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("id", sa.String(32), nullable=False, unique=True),
        sa.Column("author_id", sa.String(64),
                  sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("image_url", sa.String(2048), nullable=True),
        sa.Column("like_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("comment_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("version", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_posts_feed", "posts", ["created_at", "seq"])
    op.create_index("ix_posts_author", "posts", ["author_id"])

    op.create_table(
        "post_likes",
        sa.Column("post_id", sa.String(32),
                  sa.ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("user_id", sa.String(64),
                  sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "post_comments",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("post_id", sa.String(32),
                  sa.ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer, nullable=False),
        sa.Column("author_id", sa.String(64),
                  sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("post_id", "position", name="uq_post_comments_position"),
    )

    # --- communities ---
    op.create_table(
        "communities",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("industry", sa.String(32), nullable=False),
        sa.Column("creator_id", sa.String(64),
                  sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("name", name="uq_communities_name"),
    )

    op.create_table(
        "community_members",
        sa.Column("community_id", sa.String(32),
                  sa.ForeignKey("communities.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("user_id", sa.String(64),
                  sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("joined_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- messaging ---
    op.create_table(
        "chats",
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("is_group", sa.Boolean, server_default=sa.false()),
        sa.Column("group_name", sa.String(100), nullable=True),
        sa.Column("pair_key", sa.String(140), nullable=True, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("last_message_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "chat_participants",
        sa.Column("chat_id", sa.String(32),
                  sa.ForeignKey("chats.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("user_id", sa.String(64),
                  sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_index("ix_chat_participants_user", "chat_participants", ["user_id"])

    op.create_table(
        "messages",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("chat_id", sa.String(32),
                  sa.ForeignKey("chats.id", ondelete="CASCADE"), nullable=False),
        sa.Column("sender_id", sa.String(64),
                  sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_messages_chat", "messages", ["chat_id", "id"])


def downgrade() -> None:
    """Drop every table, children first."""
    op.drop_index("ix_messages_chat", table_name="messages")
    op.drop_table("messages")
    op.drop_index("ix_chat_participants_user", table_name="chat_participants")
    op.drop_table("chat_participants")
    op.drop_table("chats")
    op.drop_table("community_members")
    op.drop_table("communities")
    op.drop_table("post_comments")
    op.drop_table("post_likes")
    op.drop_index("ix_posts_author", table_name="posts")
    op.drop_index("ix_posts_feed", table_name="posts")
    op.drop_table("posts")
    op.drop_index("ix_connection_edges_addressee", table_name="connection_edges")
    op.drop_index("ix_connection_edges_requester", table_name="connection_edges")
    op.drop_table("connection_edges")
    op.drop_index("ix_users_role", table_name="users")
    op.drop_table("users")

"""
startupconnect.services.messaging_service — Chats Between Connections
=======================================================================

Messaging unlocks with a connection: a direct chat can only be opened,
and written to, while the two members are connected.  Group chats are
created by a member for people they are connected with.

Direct chats are unique per pair (``chats.pair_key``), so opening a chat
that already exists returns it instead of creating a second one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from startupconnect.database.engine import store_errors
from startupconnect.database.models import Chat, ChatParticipant, Message
from startupconnect.engine.content import new_id, normalize_message
from startupconnect.engine.relationships import ConnectionStatus, pair_key
from startupconnect.errors import ChatNotFound, NotAParticipant, NotConnected
from startupconnect.services.relationship_service import require_users, status_between

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MessageView:
    id: int
    chat_id: str
    sender_id: str
    content: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class ChatView:
    id: str
    is_group: bool
    group_name: str | None
    participant_ids: list[str] = field(default_factory=list)
    last_message: MessageView | None = None


def _message_view(m: Message) -> MessageView:
    return MessageView(
        id=m.id,
        chat_id=m.chat_id,
        sender_id=m.sender_id,
        content=m.content,
        created_at=m.created_at,
    )


def _participants(session: Session, chat_id: str) -> list[str]:
    return list(session.scalars(
        select(ChatParticipant.user_id)
        .where(ChatParticipant.chat_id == chat_id)
        .order_by(ChatParticipant.user_id)
    ))


def _last_message(session: Session, chat_id: str) -> MessageView | None:
    message = session.scalars(
        select(Message).where(Message.chat_id == chat_id)
        .order_by(Message.id.desc()).limit(1)
    ).first()
    return _message_view(message) if message else None


def _chat_view(session: Session, chat: Chat) -> ChatView:
    return ChatView(
        id=chat.id,
        is_group=chat.is_group,
        group_name=chat.group_name,
        participant_ids=_participants(session, chat.id),
        last_message=_last_message(session, chat.id),
    )


def _require_participant(session: Session, chat_id: str, user_id: str) -> Chat:
    chat = session.get(Chat, chat_id)
    if chat is None:
        raise ChatNotFound(f"Chat {chat_id!r} not found.")
    if session.get(ChatParticipant, (chat_id, user_id)) is None:
        raise NotAParticipant()
    return chat


def _require_connected(session: Session, user_id: str, other_id: str) -> None:
    if status_between(session, user_id, other_id) != ConnectionStatus.CONNECTED:
        raise NotConnected(f"You must be connected with {other_id!r} to message them.")


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------
@store_errors()
def open_direct_chat(engine: Engine, user_id: str, other_id: str) -> ChatView:
    """Return the pair's direct chat, creating it on first use."""
    key = pair_key(user_id, other_id)

    with Session(engine) as session:
        require_users(session, user_id, other_id)
        _require_connected(session, user_id, other_id)

        chat = session.scalars(select(Chat).where(Chat.pair_key == key)).first()
        if chat is None:
            chat = Chat(id=new_id(), is_group=False, pair_key=key)
            try:
                with session.begin_nested():   # SAVEPOINT
                    session.add(chat)
                    session.flush()
                    session.add_all([
                        ChatParticipant(chat_id=chat.id, user_id=user_id),
                        ChatParticipant(chat_id=chat.id, user_id=other_id),
                    ])
                    session.flush()
            except IntegrityError:
                # Opened concurrently by the other member.
                chat = session.scalars(select(Chat).where(Chat.pair_key == key)).one()
            else:
                logger.info("Direct chat %s opened between %s and %s", chat.id, user_id, other_id)
            session.commit()

        return _chat_view(session, chat)


@store_errors()
def create_group_chat(
    engine: Engine,
    creator_id: str,
    participant_ids: list[str],
    group_name: str,
) -> ChatView:
    """Start a group chat with members the creator is connected to."""
    name = (group_name or "").strip() or None
    others = [uid for uid in dict.fromkeys(participant_ids) if uid != creator_id]

    with Session(engine) as session:
        require_users(session, creator_id, *others)
        for other_id in others:
            _require_connected(session, creator_id, other_id)

        chat = Chat(id=new_id(), is_group=True, group_name=name)
        session.add(chat)
        session.flush()
        session.add_all(
            ChatParticipant(chat_id=chat.id, user_id=uid) for uid in [creator_id, *others]
        )
        session.commit()

        logger.info("Group chat %s created by %s with %d members",
                    chat.id, creator_id, len(others) + 1)
        return _chat_view(session, chat)


@store_errors()
def send_message(engine: Engine, chat_id: str, sender_id: str, text: str) -> MessageView:
    """Append a message.  Direct chats stay locked while the pair is not connected."""
    content = normalize_message(text)

    with Session(engine) as session:
        chat = _require_participant(session, chat_id, sender_id)
        if not chat.is_group:
            other_id = next(
                (uid for uid in _participants(session, chat_id) if uid != sender_id), None
            )
            if other_id is not None:
                _require_connected(session, sender_id, other_id)

        now = datetime.now(UTC)
        message = Message(chat_id=chat_id, sender_id=sender_id, content=content, created_at=now)
        session.add(message)
        chat.last_message_at = now
        session.flush()
        view = _message_view(message)
        session.commit()

    return view


@store_errors()
def list_chats(engine: Engine, user_id: str) -> list[ChatView]:
    """Chats *user_id* takes part in, most recent activity first."""
    with Session(engine) as session:
        chats = session.scalars(
            select(Chat)
            .join(ChatParticipant, ChatParticipant.chat_id == Chat.id)
            .where(ChatParticipant.user_id == user_id)
            .order_by(func.coalesce(Chat.last_message_at, Chat.created_at).desc(), Chat.id)
        ).all()
        return [_chat_view(session, chat) for chat in chats]


@store_errors()
def list_messages(
    engine: Engine,
    chat_id: str,
    user_id: str,
    *,
    limit: int | None = None,
) -> list[MessageView]:
    """Messages oldest first (the latest *limit* when given)."""
    with Session(engine) as session:
        _require_participant(session, chat_id, user_id)
        query = select(Message).where(Message.chat_id == chat_id).order_by(Message.id.desc())
        if limit is not None:
            query = query.limit(limit)
        messages = [_message_view(m) for m in session.scalars(query)]
    messages.reverse()
    return messages

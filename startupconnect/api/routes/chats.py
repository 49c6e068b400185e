"""
startupconnect.api.routes.chats — Direct & group messaging
============================================================

``POST /chats`` with a single participant and no ``group_name`` opens (or
returns) the direct chat with that member; anything else starts a group.
"""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Query, status
from pydantic import BaseModel, Field

from startupconnect.api.deps import CurrentUser, EngineDep
from startupconnect.database.engine import run_db
from startupconnect.services import messaging_service

router = APIRouter(prefix="/chats", tags=["chats"])


class NewChat(BaseModel):
    participant_ids: list[str] = Field(min_length=1)
    group_name: str | None = None


class NewMessage(BaseModel):
    content: str


@router.get("")
def list_chats(user_id: CurrentUser, engine: EngineDep):
    return {"chats": [asdict(c) for c in messaging_service.list_chats(engine, user_id)]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def open_chat(body: NewChat, user_id: CurrentUser, engine: EngineDep):
    if len(body.participant_ids) == 1 and not body.group_name:
        chat = await run_db(
            messaging_service.open_direct_chat, engine, user_id, body.participant_ids[0]
        )
    else:
        chat = await run_db(
            messaging_service.create_group_chat,
            engine,
            user_id,
            body.participant_ids,
            body.group_name or "",
        )
    return asdict(chat)


@router.get("/{chat_id}/messages")
def list_messages(
    chat_id: str,
    user_id: CurrentUser,
    engine: EngineDep,
    limit: int | None = Query(None, ge=1, le=500),
):
    messages = messaging_service.list_messages(engine, chat_id, user_id, limit=limit)
    return {"messages": [asdict(m) for m in messages]}


@router.post("/{chat_id}/messages", status_code=status.HTTP_201_CREATED)
async def send_message(chat_id: str, body: NewMessage, user_id: CurrentUser, engine: EngineDep):
    message = await run_db(messaging_service.send_message, engine, chat_id, user_id, body.content)
    return asdict(message)

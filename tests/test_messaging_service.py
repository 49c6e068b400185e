"""
tests/test_messaging_service.py — Messaging Unlock Tests
=========================================================
Direct chats open only between connected members, stay unique per pair,
and lock again when the connection is removed.

Uses an in-memory SQLite database via the shared conftest fixtures.
"""

from __future__ import annotations

import pytest

from startupconnect.errors import (
    ChatNotFound,
    EmptyMessage,
    NotAParticipant,
    NotConnected,
)
from startupconnect.services import messaging_service as ms
from startupconnect.services import relationship_service as rs


@pytest.fixture
def connected(db_engine, members):
    """alice and bob are connected; carol knows nobody."""
    rs.send_request(db_engine, "alice", "bob")
    rs.accept_request(db_engine, "bob", "alice")
    return members


class TestDirectChats:
    def test_requires_connection(self, db_engine, members):
        with pytest.raises(NotConnected):
            ms.open_direct_chat(db_engine, "alice", "carol")

    def test_pending_request_is_not_enough(self, db_engine, members):
        rs.send_request(db_engine, "alice", "carol")
        with pytest.raises(NotConnected):
            ms.open_direct_chat(db_engine, "alice", "carol")

    def test_one_chat_per_pair(self, db_engine, connected):
        first = ms.open_direct_chat(db_engine, "alice", "bob")
        second = ms.open_direct_chat(db_engine, "bob", "alice")
        assert first.id == second.id
        assert first.is_group is False
        assert first.participant_ids == ["alice", "bob"]
        assert len(ms.list_chats(db_engine, "alice")) == 1

    def test_send_and_list_messages(self, db_engine, connected):
        chat = ms.open_direct_chat(db_engine, "alice", "bob")
        ms.send_message(db_engine, chat.id, "alice", "  Coffee next week?  ")
        ms.send_message(db_engine, chat.id, "bob", "Sure, Tuesday works.")

        messages = ms.list_messages(db_engine, chat.id, "bob")
        assert [m.content for m in messages] == ["Coffee next week?", "Sure, Tuesday works."]
        assert [m.content for m in ms.list_messages(db_engine, chat.id, "bob", limit=1)] == [
            "Sure, Tuesday works."
        ]

        listed = ms.list_chats(db_engine, "alice")
        assert listed[0].last_message.content == "Sure, Tuesday works."

    def test_empty_message(self, db_engine, connected):
        chat = ms.open_direct_chat(db_engine, "alice", "bob")
        with pytest.raises(EmptyMessage):
            ms.send_message(db_engine, chat.id, "alice", "   ")
        assert ms.list_messages(db_engine, chat.id, "alice") == []

    def test_outsider_cannot_read_or_write(self, db_engine, connected):
        chat = ms.open_direct_chat(db_engine, "alice", "bob")
        with pytest.raises(NotAParticipant):
            ms.send_message(db_engine, chat.id, "carol", "hi")
        with pytest.raises(NotAParticipant):
            ms.list_messages(db_engine, chat.id, "carol")

    def test_disconnect_locks_chat(self, db_engine, connected):
        chat = ms.open_direct_chat(db_engine, "alice", "bob")
        rs.remove_connection(db_engine, "alice", "bob")
        with pytest.raises(NotConnected):
            ms.send_message(db_engine, chat.id, "bob", "still there?")

    def test_unknown_chat(self, db_engine, members):
        with pytest.raises(ChatNotFound):
            ms.send_message(db_engine, "missing", "alice", "hi")


class TestGroupChats:
    def test_group_with_connections(self, db_engine, connected):
        rs.send_request(db_engine, "carol", "alice")
        rs.accept_request(db_engine, "alice", "carol")

        chat = ms.create_group_chat(db_engine, "alice", ["bob", "carol", "bob"], " Seed round ")
        assert chat.is_group is True
        assert chat.group_name == "Seed round"
        assert chat.participant_ids == ["alice", "bob", "carol"]

        ms.send_message(db_engine, chat.id, "carol", "Welcome all")
        assert [m.sender_id for m in ms.list_messages(db_engine, chat.id, "bob")] == ["carol"]

    def test_group_requires_connections(self, db_engine, connected):
        with pytest.raises(NotConnected):
            ms.create_group_chat(db_engine, "alice", ["bob", "carol"], "Everyone")
        assert ms.list_chats(db_engine, "alice") == []

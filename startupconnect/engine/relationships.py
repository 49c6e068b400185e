"""
startupconnect.engine.relationships — Connection Edge Rules
=============================================================

Pure rules for the connection lifecycle.  Storage lives in
:mod:`startupconnect.services.relationship_service`; this module only
answers "what is the state of this pair?" and "is this transition legal?".

Every unordered pair of users has at most one edge::

    not_connected ──send──▶ pending(A→B) ──accept(by B)──▶ connected
          ▲                      │                             │
          └──decline/cancel──────┘                             │
          └──────────────────────disconnect────────────────────┘

Accept is one-way: a connected pair never returns to pending.
"""

from __future__ import annotations

import enum
from typing import Protocol

from startupconnect.database.models import EdgeState
from startupconnect.errors import AlreadyConnected, RequestAlreadyPending, SelfConnection

__all__ = [
    "ConnectionStatus",
    "canonical_pair",
    "check_can_send",
    "pair_key",
    "status_from_edge",
]


class ConnectionStatus(enum.StrEnum):
    """Pair state as seen from one member's side."""
    NOT_CONNECTED = "not_connected"
    PENDING_SENT = "pending_sent"
    PENDING_RECEIVED = "pending_received"
    CONNECTED = "connected"


class EdgeLike(Protocol):
    requester_id: str
    addressee_id: str
    state: str


def canonical_pair(user_a: str, user_b: str) -> tuple[str, str]:
    """Order two distinct user ids; the result is the edge's primary key."""
    if user_a == user_b:
        raise SelfConnection()
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)


def pair_key(user_a: str, user_b: str) -> str:
    """Stable string key for a pair, used for one-per-pair direct chats."""
    low, high = canonical_pair(user_a, user_b)
    return f"{low}:{high}"


def status_from_edge(edge: EdgeLike | None, viewer_id: str) -> ConnectionStatus:
    """Resolve the stored edge into *viewer_id*'s :class:`ConnectionStatus`."""
    if edge is None:
        return ConnectionStatus.NOT_CONNECTED
    if edge.state == EdgeState.CONNECTED:
        return ConnectionStatus.CONNECTED
    if edge.requester_id == viewer_id:
        return ConnectionStatus.PENDING_SENT
    return ConnectionStatus.PENDING_RECEIVED


def check_can_send(edge: EdgeLike | None) -> None:
    """Raise unless a new request may be created for the pair.

    A pending edge in *either* direction blocks the send: the recipient of
    the existing request resolves the pair by accepting it.
    """
    if edge is None:
        return
    if edge.state == EdgeState.CONNECTED:
        raise AlreadyConnected()
    raise RequestAlreadyPending()

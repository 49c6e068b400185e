"""
startupconnect.services.relationship_service — Connection Lifecycle
=====================================================================

Persists the connection graph and enforces the lifecycle rules from
:mod:`startupconnect.engine.relationships`.

Each unordered pair owns exactly one ``connection_edges`` row (primary key
``(user_low, user_high)``), which is what linearizes every operation on a
pair:

* ``send_request`` inserts the row inside a SAVEPOINT.  Two opposite sends
  racing each other collide on the primary key; the loser re-reads the
  winner's row and reports ``RequestAlreadyPending``.
* ``accept_request`` is a conditional UPDATE (``state='pending' AND
  requester_id=… AND addressee_id=…``).  Zero affected rows means there is
  nothing to accept.
* ``decline_or_cancel_request`` / ``remove_connection`` are conditional
  DELETEs and therefore idempotent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from startupconnect.database.engine import store_errors
from startupconnect.database.models import ConnectionEdge, EdgeState, User
from startupconnect.engine.relationships import (
    ConnectionStatus,
    canonical_pair,
    check_can_send,
    status_from_edge,
)
from startupconnect.errors import NoPendingRequest, RequestAlreadyPending, UserNotFound

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NetworkView:
    """A member's three id-sets."""

    user_id: str
    connections: list[str] = field(default_factory=list)
    incoming: list[str] = field(default_factory=list)
    outgoing: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Session-level helpers (shared with other services)
# ---------------------------------------------------------------------------
def require_users(session: Session, *user_ids: str) -> None:
    """Raise :class:`UserNotFound` for the first id without a users row."""
    for user_id in user_ids:
        if session.get(User, user_id) is None:
            raise UserNotFound(f"User {user_id!r} not found.")


def get_edge(session: Session, user_a: str, user_b: str) -> ConnectionEdge | None:
    return session.get(ConnectionEdge, canonical_pair(user_a, user_b))


def status_between(session: Session, viewer_id: str, other_id: str) -> ConnectionStatus:
    """Pair status from *viewer_id*'s side, within an open session."""
    return status_from_edge(get_edge(session, viewer_id, other_id), viewer_id)


def network_ids(session: Session, user_id: str) -> NetworkView:
    """Collect connections, incoming and outgoing request ids for *user_id*."""
    rows = session.execute(
        select(
            ConnectionEdge.requester_id,
            ConnectionEdge.addressee_id,
            ConnectionEdge.state,
        )
        .where(
            or_(
                ConnectionEdge.requester_id == user_id,
                ConnectionEdge.addressee_id == user_id,
            )
        )
        .order_by(ConnectionEdge.updated_at, ConnectionEdge.requester_id)
    ).all()

    view = NetworkView(user_id=user_id)
    for requester_id, addressee_id, state in rows:
        other = addressee_id if requester_id == user_id else requester_id
        if state == EdgeState.CONNECTED:
            view.connections.append(other)
        elif requester_id == user_id:
            view.outgoing.append(other)
        else:
            view.incoming.append(other)
    return view


def _pair_clause(user_a: str, user_b: str):
    low, high = canonical_pair(user_a, user_b)
    return and_(ConnectionEdge.user_low == low, ConnectionEdge.user_high == high)


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------
@store_errors()
def send_request(engine: Engine, requester_id: str, target_id: str) -> ConnectionStatus:
    """Create a pending request ``requester → target``.

    Raises ``SelfConnection``, ``UserNotFound``, ``AlreadyConnected`` or
    ``RequestAlreadyPending`` (also when the pending request runs the other
    way).  Returns :attr:`ConnectionStatus.PENDING_SENT`.
    """
    low, high = canonical_pair(requester_id, target_id)

    with Session(engine) as session:
        require_users(session, requester_id, target_id)
        check_can_send(session.get(ConnectionEdge, (low, high)))

        try:
            with session.begin_nested():   # SAVEPOINT
                session.add(ConnectionEdge(
                    user_low=low,
                    user_high=high,
                    requester_id=requester_id,
                    addressee_id=target_id,
                    state=EdgeState.PENDING.value,
                ))
                session.flush()
        except IntegrityError:
            # A concurrent send for the same pair committed first.
            winner = session.get(ConnectionEdge, (low, high), populate_existing=True)
            check_can_send(winner)
            raise RequestAlreadyPending() from None

        session.commit()

    logger.info("Connection request %s → %s", requester_id, target_id)
    return ConnectionStatus.PENDING_SENT


@store_errors()
def accept_request(engine: Engine, accepter_id: str, requester_id: str) -> ConnectionStatus:
    """Turn the pending ``requester → accepter`` edge into a connection.

    Raises ``NoPendingRequest`` when there is no such edge, whether it was
    never sent, already accepted or declined.
    """
    if accepter_id == requester_id:
        raise NoPendingRequest()

    with Session(engine) as session:
        result = session.execute(
            update(ConnectionEdge)
            .where(
                _pair_clause(accepter_id, requester_id),
                ConnectionEdge.state == EdgeState.PENDING.value,
                ConnectionEdge.requester_id == requester_id,
                ConnectionEdge.addressee_id == accepter_id,
            )
            .values(state=EdgeState.CONNECTED.value, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            session.rollback()
            raise NoPendingRequest()
        session.commit()

    logger.info("Connection accepted %s ↔ %s", requester_id, accepter_id)
    return ConnectionStatus.CONNECTED


@store_errors()
def decline_or_cancel_request(engine: Engine, actor_id: str, other_id: str) -> ConnectionStatus:
    """Delete the pending edge between the two users, whichever way it runs.

    The sender calling this cancels, the recipient declines.  Idempotent:
    with no pending edge it is a successful no-op.  A connected pair is left
    untouched.  Returns the resulting status from *actor_id*'s side.
    """
    if actor_id == other_id:
        return ConnectionStatus.NOT_CONNECTED

    with Session(engine) as session:
        result = session.execute(
            delete(ConnectionEdge)
            .where(
                _pair_clause(actor_id, other_id),
                ConnectionEdge.state == EdgeState.PENDING.value,
            )
            .execution_options(synchronize_session=False)
        )
        session.commit()
        if result.rowcount:
            logger.info("Connection request between %s and %s withdrawn by %s",
                        actor_id, other_id, actor_id)
        else:
            logger.debug("No pending request between %s and %s", actor_id, other_id)
        return status_between(session, actor_id, other_id)


@store_errors()
def remove_connection(engine: Engine, actor_id: str, other_id: str) -> ConnectionStatus:
    """Disconnect two connected users.  Idempotent; pending edges are untouched."""
    with Session(engine) as session:
        result = session.execute(
            delete(ConnectionEdge)
            .where(
                _pair_clause(actor_id, other_id),
                ConnectionEdge.state == EdgeState.CONNECTED.value,
            )
            .execution_options(synchronize_session=False)
        )
        session.commit()
        if result.rowcount:
            logger.info("Connection %s ↔ %s removed by %s", actor_id, other_id, actor_id)
        return status_between(session, actor_id, other_id)


@store_errors()
def connection_status(engine: Engine, user_a: str, user_b: str) -> ConnectionStatus:
    """Status of the pair from *user_a*'s side (single primary-key lookup)."""
    with Session(engine) as session:
        return status_between(session, user_a, user_b)


@store_errors()
def list_network(engine: Engine, user_id: str) -> NetworkView:
    with Session(engine) as session:
        require_users(session, user_id)
        return network_ids(session, user_id)

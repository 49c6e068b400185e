"""
startupconnect.api.routes.network — Connection requests & the member's network
================================================================================

Every mutation answers with the pair's status from the caller's side::

    {"user_id": "<other>", "status": "pending_sent"}
"""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Query

from startupconnect.api.deps import CurrentUser, EngineDep
from startupconnect.constants import DEFAULT_SUGGESTION_LIMIT
from startupconnect.database.engine import run_db
from startupconnect.engine.relationships import ConnectionStatus
from startupconnect.services import relationship_service, user_service

router = APIRouter(prefix="/network", tags=["network"])


def _status_body(other_id: str, status: ConnectionStatus) -> dict:
    return {"user_id": other_id, "status": status.value}


# ---------------------------------------------------------------------------
# GET /network
# ---------------------------------------------------------------------------
@router.get("")
def get_network(
    user_id: CurrentUser,
    engine: EngineDep,
    suggestions: int = Query(DEFAULT_SUGGESTION_LIMIT, ge=0, le=50),
):
    """Connections, incoming and outgoing requests, and people to meet."""
    network = relationship_service.list_network(engine, user_id)
    return {
        "connections": [asdict(m) for m in user_service.get_summaries(engine, network.connections)],
        "incoming": [asdict(m) for m in user_service.get_summaries(engine, network.incoming)],
        "outgoing": [asdict(m) for m in user_service.get_summaries(engine, network.outgoing)],
        "suggestions": [
            asdict(m) for m in user_service.suggest_connections(engine, user_id, suggestions)
        ],
    }


# ---------------------------------------------------------------------------
# Pair status & lifecycle
# ---------------------------------------------------------------------------
@router.get("/{other_id}/status")
def get_status(other_id: str, user_id: CurrentUser, engine: EngineDep):
    return _status_body(other_id, relationship_service.connection_status(engine, user_id, other_id))


@router.post("/{target_id}/request")
async def send_request(target_id: str, user_id: CurrentUser, engine: EngineDep):
    status = await run_db(relationship_service.send_request, engine, user_id, target_id)
    return _status_body(target_id, status)


@router.post("/{requester_id}/accept")
async def accept_request(requester_id: str, user_id: CurrentUser, engine: EngineDep):
    status = await run_db(relationship_service.accept_request, engine, user_id, requester_id)
    return _status_body(requester_id, status)


@router.delete("/{other_id}/request")
async def decline_or_cancel_request(other_id: str, user_id: CurrentUser, engine: EngineDep):
    """Decline an incoming request or withdraw an outgoing one."""
    status = await run_db(
        relationship_service.decline_or_cancel_request, engine, user_id, other_id
    )
    return _status_body(other_id, status)


@router.delete("/{other_id}")
async def remove_connection(other_id: str, user_id: CurrentUser, engine: EngineDep):
    status = await run_db(relationship_service.remove_connection, engine, user_id, other_id)
    return _status_body(other_id, status)

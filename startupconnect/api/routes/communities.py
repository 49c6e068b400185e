"""
startupconnect.api.routes.communities — Industry communities
==============================================================
"""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, status
from pydantic import BaseModel

from startupconnect.api.deps import CurrentUser, EngineDep
from startupconnect.services import community_service

router = APIRouter(prefix="/communities", tags=["communities"])


class NewCommunity(BaseModel):
    name: str
    description: str
    industry: str


@router.get("")
def list_communities(engine: EngineDep, industry: str | None = None):
    return {"communities": [asdict(c) for c in community_service.list_communities(engine, industry)]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_community(body: NewCommunity, user_id: CurrentUser, engine: EngineDep):
    community = community_service.create_community(
        engine,
        user_id,
        name=body.name,
        description=body.description,
        industry=body.industry,
    )
    return asdict(community)


@router.get("/{community_id}")
def get_community(community_id: str, engine: EngineDep):
    body = asdict(community_service.get_community(engine, community_id))
    body["members"] = community_service.list_members(engine, community_id)
    return body


@router.post("/{community_id}/membership")
def join(community_id: str, user_id: CurrentUser, engine: EngineDep):
    return asdict(community_service.join_community(engine, community_id, user_id))


@router.delete("/{community_id}/membership")
def leave(community_id: str, user_id: CurrentUser, engine: EngineDep):
    return asdict(community_service.leave_community(engine, community_id, user_id))

"""
startupconnect.services.community_service — Communities & Membership
======================================================================

Membership is a set keyed by ``(community_id, user_id)``: joining twice or
leaving twice is harmless.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from startupconnect.database.engine import store_errors
from startupconnect.database.models import Community, CommunityMember
from startupconnect.engine.content import new_id, validate_community
from startupconnect.errors import CommunityNotFound, InvalidCommunity
from startupconnect.services.relationship_service import require_users

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommunityView:
    id: str
    name: str
    description: str
    industry: str
    creator_id: str | None
    created_at: datetime | None
    member_count: int


@dataclass(frozen=True, slots=True)
class MembershipResult:
    community_id: str
    member_count: int
    is_member: bool


def _member_count(session: Session, community_id: str) -> int:
    return session.scalar(
        select(func.count()).select_from(CommunityMember)
        .where(CommunityMember.community_id == community_id)
    ) or 0


def _view(c: Community, member_count: int) -> CommunityView:
    return CommunityView(
        id=c.id,
        name=c.name,
        description=c.description,
        industry=c.industry,
        creator_id=c.creator_id,
        created_at=c.created_at,
        member_count=member_count,
    )


def _require_community(session: Session, community_id: str) -> Community:
    community = session.get(Community, community_id)
    if community is None:
        raise CommunityNotFound(f"Community {community_id!r} not found.")
    return community


@store_errors()
def create_community(
    engine: Engine,
    creator_id: str,
    *,
    name: str,
    description: str,
    industry: str,
) -> CommunityView:
    """Create a community; the creator becomes its first member."""
    name, description, industry = validate_community(name, description, industry)

    with Session(engine) as session:
        require_users(session, creator_id)
        if session.scalar(select(Community.id).where(Community.name == name)):
            raise InvalidCommunity("name", "A community with this name already exists.")

        community = Community(
            id=new_id(),
            name=name,
            description=description,
            industry=industry,
            creator_id=creator_id,
        )
        try:
            with session.begin_nested():   # SAVEPOINT
                session.add(community)
                session.flush()
        except IntegrityError:
            raise InvalidCommunity("name", "A community with this name already exists.") from None
        session.add(CommunityMember(community_id=community.id, user_id=creator_id))
        session.commit()

        logger.info("Community %s (%s) created by %s", community.id, name, creator_id)
        return _view(community, 1)


@store_errors()
def get_community(engine: Engine, community_id: str) -> CommunityView:
    with Session(engine) as session:
        community = _require_community(session, community_id)
        return _view(community, _member_count(session, community_id))


@store_errors()
def list_members(engine: Engine, community_id: str) -> list[str]:
    with Session(engine) as session:
        _require_community(session, community_id)
        return list(session.scalars(
            select(CommunityMember.user_id)
            .where(CommunityMember.community_id == community_id)
            .order_by(CommunityMember.joined_at, CommunityMember.user_id)
        ))


@store_errors()
def list_communities(engine: Engine, industry: str | None = None) -> list[CommunityView]:
    """All communities, largest first."""
    counts = (
        select(CommunityMember.community_id, func.count().label("members"))
        .group_by(CommunityMember.community_id)
        .subquery()
    )
    query = (
        select(Community, func.coalesce(counts.c.members, 0))
        .outerjoin(counts, counts.c.community_id == Community.id)
        .order_by(func.coalesce(counts.c.members, 0).desc(), Community.name)
    )
    if industry:
        query = query.where(Community.industry == industry)

    with Session(engine) as session:
        return [_view(c, n) for c, n in session.execute(query)]


@store_errors()
def join_community(engine: Engine, community_id: str, user_id: str) -> MembershipResult:
    with Session(engine) as session:
        _require_community(session, community_id)
        require_users(session, user_id)
        if session.get(CommunityMember, (community_id, user_id)) is None:
            try:
                with session.begin_nested():   # SAVEPOINT
                    session.add(CommunityMember(community_id=community_id, user_id=user_id))
                    session.flush()
            except IntegrityError:
                logger.debug("User %s joined %s concurrently", user_id, community_id)
        session.commit()
        return MembershipResult(community_id, _member_count(session, community_id), True)


@store_errors()
def leave_community(engine: Engine, community_id: str, user_id: str) -> MembershipResult:
    with Session(engine) as session:
        _require_community(session, community_id)
        session.execute(
            delete(CommunityMember).where(
                CommunityMember.community_id == community_id,
                CommunityMember.user_id == user_id,
            )
        )
        session.commit()
        return MembershipResult(community_id, _member_count(session, community_id), False)

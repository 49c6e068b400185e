"""
startupconnect.services.user_service — Signup, Profiles & Suggestions
=======================================================================

Members are created at signup with a role and a profile whose shape must
match that role (see :mod:`startupconnect.engine.profiles`).  Afterwards
only the owner changes them, through :func:`update_profile`.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from startupconnect.constants import DEFAULT_SUGGESTION_LIMIT, default_profile_picture
from startupconnect.database.engine import store_errors
from startupconnect.database.models import ConnectionEdge, User, UserRole
from startupconnect.engine.profiles import (
    FounderProfile,
    InvestorProfile,
    Profile,
    display_domains,
    parse_profile,
    profile_to_json,
)
from startupconnect.errors import EmailTaken, InvalidProfile, UserNotFound
from startupconnect.services.relationship_service import network_ids

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)

_email_adapter: TypeAdapter[str] = TypeAdapter(EmailStr)


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class MemberSummary:
    """What lists of people (network, suggestions, search) show per member."""

    id: str
    name: str
    role: str
    domains: str
    profile_picture_url: str | None
    location: str | None


@dataclass(frozen=True, slots=True)
class UserView:
    id: str
    email: str
    name: str
    role: str
    profile: dict[str, Any]
    domains: str
    created_at: datetime | None
    connections: list[str] = field(default_factory=list)
    requests_sent: list[str] = field(default_factory=list)
    requests_received: list[str] = field(default_factory=list)


def load_profile(user: User) -> Profile:
    """Re-validate the stored profile JSON into its variant."""
    return parse_profile(user.role, user.profile)


def summarize(user: User) -> MemberSummary:
    profile = user.profile or {}
    return MemberSummary(
        id=user.id,
        name=user.name,
        role=user.role,
        domains=display_domains(load_profile(user)),
        profile_picture_url=profile.get("profile_picture_url"),
        location=profile.get("location"),
    )


def _user_view(session: Session, user: User) -> UserView:
    network = network_ids(session, user.id)
    return UserView(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        profile=dict(user.profile),
        domains=display_domains(load_profile(user)),
        created_at=user.created_at,
        connections=network.connections,
        requests_sent=network.outgoing,
        requests_received=network.incoming,
    )


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------
def _clean_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidProfile("name", "Name cannot be empty.")
    if len(cleaned) > 100:
        raise InvalidProfile("name", "Name is too long.")
    return cleaned


def _clean_email(email: str) -> str:
    try:
        return _email_adapter.validate_python((email or "").strip()).lower()
    except ValidationError:
        raise InvalidProfile("email", "Enter a valid email address.") from None


def _clean_role(role: UserRole | str) -> UserRole:
    try:
        return UserRole(role)
    except ValueError:
        raise InvalidProfile("role", f"Unknown role {role!r}.") from None


def _build_profile(role: UserRole, name: str, data: dict[str, Any] | None) -> Profile:
    payload = dict(data or {})
    if not payload.get("profile_picture_url"):
        payload["profile_picture_url"] = default_profile_picture(name)
    return parse_profile(role, payload)


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------
@store_errors()
def create_user(
    engine: Engine,
    *,
    email: str,
    name: str,
    role: UserRole | str,
    profile: dict[str, Any] | None = None,
    user_id: str | None = None,
) -> UserView:
    """Sign a new member up.

    Raises ``InvalidProfile`` (field detail) or ``EmailTaken``.
    """
    email = _clean_email(email)
    name = _clean_name(name)
    role = _clean_role(role)
    parsed = _build_profile(role, name, profile)

    with Session(engine) as session:
        if session.scalar(select(User.id).where(User.email == email)) is not None:
            raise EmailTaken()
        if user_id is not None and session.get(User, user_id) is not None:
            raise InvalidProfile("id", "A user with this id already exists.")

        user = User(
            id=user_id or uuid.uuid4().hex,
            email=email,
            name=name,
            role=role.value,
            profile=profile_to_json(parsed),
        )
        try:
            with session.begin_nested():   # SAVEPOINT
                session.add(user)
                session.flush()
        except IntegrityError:
            raise EmailTaken() from None
        session.commit()

        logger.info("User %s signed up as %s", user.id, role.value)
        return _user_view(session, user)


@store_errors()
def get_user(engine: Engine, user_id: str) -> UserView:
    with Session(engine) as session:
        user = session.get(User, user_id)
        if user is None:
            raise UserNotFound(f"User {user_id!r} not found.")
        return _user_view(session, user)


@store_errors()
def get_summaries(engine: Engine, user_ids: list[str]) -> list[MemberSummary]:
    """Summaries for *user_ids* in the given order; unknown ids are skipped."""
    if not user_ids:
        return []
    with Session(engine) as session:
        users = {
            u.id: u
            for u in session.scalars(select(User).where(User.id.in_(user_ids)))
        }
        return [summarize(users[uid]) for uid in user_ids if uid in users]


@store_errors()
def update_profile(
    engine: Engine,
    user_id: str,
    *,
    name: str | None = None,
    role: UserRole | str | None = None,
    profile: dict[str, Any] | None = None,
) -> UserView:
    """Owner-only settings change.

    A role change must come with a profile valid for the new role (or an
    existing profile that already is); otherwise ``InvalidProfile``.
    """
    with Session(engine) as session:
        user = session.get(User, user_id)
        if user is None:
            raise UserNotFound(f"User {user_id!r} not found.")

        new_name = _clean_name(name) if name is not None else user.name
        new_role = _clean_role(role) if role is not None else UserRole(user.role)
        if profile is not None:
            parsed = _build_profile(new_role, new_name, profile)
        else:
            parsed = parse_profile(new_role, user.profile)

        user.name = new_name
        user.role = new_role.value
        user.profile = profile_to_json(parsed)
        session.commit()

        logger.info("User %s updated their profile", user_id)
        return _user_view(session, user)


def _industries(profile: Profile) -> set[str]:
    if isinstance(profile, FounderProfile):
        return {profile.industry}
    if isinstance(profile, InvestorProfile):
        return set(profile.investment_focus)
    return set()


@store_errors()
def suggest_connections(
    engine: Engine,
    user_id: str,
    limit: int = DEFAULT_SUGGESTION_LIMIT,
) -> list[MemberSummary]:
    """Members with no edge to *user_id*, shared industries first, then newest."""
    with Session(engine) as session:
        me = session.get(User, user_id)
        if me is None:
            raise UserNotFound(f"User {user_id!r} not found.")
        mine = _industries(load_profile(me))

        linked = set()
        for low, high in session.execute(
            select(ConnectionEdge.user_low, ConnectionEdge.user_high).where(
                (ConnectionEdge.user_low == user_id) | (ConnectionEdge.user_high == user_id)
            )
        ):
            linked.add(high if low == user_id else low)

        candidates = [
            u for u in session.scalars(
                select(User).where(User.id != user_id).order_by(User.created_at.desc(), User.id)
            )
            if u.id not in linked
        ]
        candidates.sort(key=lambda u: -len(mine & _industries(load_profile(u))))
        return [summarize(u) for u in candidates[:limit]]

"""
startupconnect.api.routes.users — Signup & profiles
=====================================================
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from startupconnect.api.deps import CurrentUser, EngineDep
from startupconnect.database.engine import run_db
from startupconnect.database.models import UserRole
from startupconnect.services import relationship_service, user_service

router = APIRouter(prefix="/users", tags=["users"])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class SignupRequest(BaseModel):
    id: str | None = Field(default=None, max_length=64)
    email: str
    name: str
    role: UserRole
    profile: dict[str, Any] = Field(default_factory=dict)


class ProfileUpdate(BaseModel):
    name: str | None = None
    role: UserRole | None = None
    profile: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@router.post("", status_code=status.HTTP_201_CREATED)
async def signup(body: SignupRequest, engine: EngineDep):
    """Create a member account.  ``id`` is the sign-in provider's subject, when given."""
    user = await run_db(
        user_service.create_user,
        engine,
        email=body.email,
        name=body.name,
        role=body.role,
        profile=body.profile,
        user_id=body.id,
    )
    return asdict(user)


@router.get("/me")
def get_me(user_id: CurrentUser, engine: EngineDep):
    return asdict(user_service.get_user(engine, user_id))


@router.put("/me/profile")
async def update_my_profile(body: ProfileUpdate, user_id: CurrentUser, engine: EngineDep):
    user = await run_db(
        user_service.update_profile,
        engine,
        user_id,
        name=body.name,
        role=body.role,
        profile=body.profile,
    )
    return asdict(user)


@router.get("/{member_id}")
def get_member(member_id: str, user_id: CurrentUser, engine: EngineDep):
    """Another member's profile plus how the caller relates to them."""
    member = user_service.get_user(engine, member_id)
    body = asdict(member)
    # Only the owner sees their email and pending requests.
    if member_id != user_id:
        for private in ("email", "requests_sent", "requests_received"):
            body.pop(private)
        body["connection_status"] = relationship_service.connection_status(
            engine, user_id, member_id
        ).value
    return body

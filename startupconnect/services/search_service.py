"""
startupconnect.services.search_service — People & Post Search
===============================================================

Free-text term plus optional profile filters.  Role narrows in SQL; the
profile filters look inside the role-tagged profile variants, so they are
applied in Python on the validated profiles.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.orm import Session

from startupconnect.database.engine import store_errors
from startupconnect.database.models import Post, User, UserRole
from startupconnect.engine.profiles import (
    ExpertProfile,
    FounderProfile,
    InvestorProfile,
    Profile,
)
from startupconnect.services.engagement_service import PostView, hydrate_posts
from startupconnect.services.user_service import MemberSummary, load_profile, summarize

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)

MAX_RESULTS = 50


@dataclass(frozen=True, slots=True)
class SearchFilters:
    role: UserRole | None = None
    industry: str | None = None
    location: str | None = None
    funding_stage: str | None = None
    expertise: str | None = None


@dataclass(frozen=True, slots=True)
class SearchResults:
    users: list[MemberSummary] = field(default_factory=list)
    posts: list[PostView] = field(default_factory=list)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def profile_matches(profile: Profile, filters: SearchFilters) -> bool:
    """True when *profile* satisfies every filter that is set."""
    if filters.industry:
        industries: list[str] = []
        if isinstance(profile, FounderProfile):
            industries = [profile.industry]
        elif isinstance(profile, InvestorProfile):
            industries = profile.investment_focus
        if filters.industry not in industries:
            return False

    if filters.funding_stage:
        stages: list[str] = []
        if isinstance(profile, FounderProfile):
            stages = [profile.funding_stage]
        elif isinstance(profile, InvestorProfile):
            stages = profile.preferred_funding_stages
        if filters.funding_stage not in stages:
            return False

    if filters.expertise:
        if not isinstance(profile, ExpertProfile) or profile.area_of_expertise != filters.expertise:
            return False

    if filters.location:
        if filters.location.lower() not in (profile.location or "").lower():
            return False

    return True


def _term_matches(user: User, profile: Profile, term: str) -> bool:
    if not term:
        return True
    return term in user.name.lower() or term in (profile.bio or "").lower()


@store_errors()
def search(
    engine: Engine,
    term: str = "",
    filters: SearchFilters | None = None,
    exclude_user_id: str | None = None,
) -> SearchResults:
    """Members whose name or bio contains *term* and who pass *filters*,
    plus posts whose text contains *term*.  Posts ignore the profile filters.

    *exclude_user_id* (usually the caller) is left out of the members.
    """
    term = (term or "").strip().lower()
    filters = filters or SearchFilters()

    user_query = select(User).order_by(User.name, User.id)
    if filters.role is not None:
        user_query = user_query.where(User.role == UserRole(filters.role).value)
    if exclude_user_id is not None:
        user_query = user_query.where(User.id != exclude_user_id)

    post_query = select(Post).order_by(Post.created_at.desc(), Post.seq.desc()).limit(MAX_RESULTS)
    if term:
        post_query = post_query.where(Post.content.ilike(f"%{_escape_like(term)}%", escape="\\"))

    with Session(engine) as session:
        users: list[MemberSummary] = []
        for user in session.scalars(user_query):
            profile = load_profile(user)
            if _term_matches(user, profile, term) and profile_matches(profile, filters):
                users.append(summarize(user))
                if len(users) >= MAX_RESULTS:
                    break
        posts = hydrate_posts(session, list(session.scalars(post_query)))

    logger.debug("Search %r → %d users, %d posts", term, len(users), len(posts))
    return SearchResults(users=users, posts=posts)

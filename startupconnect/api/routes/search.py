"""
startupconnect.api.routes.search — People & post search
=========================================================
"""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter

from startupconnect.api.deps import CurrentUser, EngineDep
from startupconnect.api.routes.posts import post_dict
from startupconnect.database.models import UserRole
from startupconnect.services.search_service import SearchFilters, search

router = APIRouter(tags=["search"])


@router.get("/search")
def run_search(
    user_id: CurrentUser,
    engine: EngineDep,
    q: str = "",
    role: UserRole | None = None,
    industry: str | None = None,
    location: str | None = None,
    funding_stage: str | None = None,
    expertise: str | None = None,
):
    filters = SearchFilters(
        role=role,
        industry=industry,
        location=location,
        funding_stage=funding_stage,
        expertise=expertise,
    )
    results = search(engine, q, filters, exclude_user_id=user_id)
    return {
        "users": [asdict(u) for u in results.users],
        "posts": [post_dict(p) for p in results.posts],
    }

"""
startupconnect.api.routes.meta — App identity & vocabularies
==============================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from startupconnect.api.deps import get_config
from startupconnect.config import AppConfig
from startupconnect.constants import (
    EXPERTISE_AREAS,
    FUNDING_STAGES,
    INDUSTRIES,
    LANGUAGES,
    MAX_POST_LENGTH,
)
from startupconnect.database.models import UserRole

router = APIRouter(tags=["meta"])


@router.get("/meta")
def get_meta(cfg: AppConfig = Depends(get_config)):
    """Everything a client needs to render signup and profile forms."""
    return {
        "app_name": cfg.app_name,
        "tagline": cfg.tagline,
        "feed_page_size": cfg.feed_page_size,
        "default_language": cfg.default_language,
        "roles": [r.value for r in UserRole],
        "industries": list(INDUSTRIES),
        "funding_stages": list(FUNDING_STAGES),
        "expertise_areas": list(EXPERTISE_AREAS),
        "languages": LANGUAGES,
        "max_post_length": MAX_POST_LENGTH,
    }

"""
startupconnect.constants — Shared Constants & Helpers
=======================================================

Single source of truth for the profile vocabularies (industries, funding
stages, expertise areas, languages) and the content limits.  Import from
here instead of duplicating in services, routes and tests.
"""

from __future__ import annotations

from urllib.parse import quote

APP_NAME = "StartupConnect"

# ---------------------------------------------------------------------------
# Profile vocabularies (used by profile validation, search filters, /meta)
# ---------------------------------------------------------------------------
INDUSTRIES: tuple[str, ...] = (
    "B2B SaaS",
    "EdTech",
    "Climate Tech",
    "FinTech",
    "HealthTech",
    "Consumer Goods",
    "AI/ML",
    "Blockchain",
    "E-commerce",
    "Gaming",
)

FUNDING_STAGES: tuple[str, ...] = (
    "Pre-seed",
    "Seed",
    "Series A",
    "Series B",
    "Series C+",
    "Bootstrapped",
    "Growth Stage",
)

EXPERTISE_AREAS: tuple[str, ...] = (
    "Product Development",
    "Marketing & Sales",
    "Fundraising",
    "Technology",
    "Operations",
    "Legal",
    "Finance",
    "HR & Talent",
)

LANGUAGES: dict[str, str] = {
    "en": "English",
    "hi": "Hindi",
    "ta": "Tamil",
}

# ---------------------------------------------------------------------------
# Content limits
# ---------------------------------------------------------------------------
MAX_POST_LENGTH = 2000

COMMUNITY_NAME_MIN = 3
COMMUNITY_NAME_MAX = 50
COMMUNITY_DESCRIPTION_MIN = 10
COMMUNITY_DESCRIPTION_MAX = 500

DEFAULT_SUGGESTION_LIMIT = 5


# ---------------------------------------------------------------------------
# Presentation helpers
# ---------------------------------------------------------------------------
def default_profile_picture(name: str) -> str:
    """Placeholder avatar URL showing the first initial of *name*."""
    initial = (name.strip()[:1] or "U").upper()
    return f"https://placehold.co/100x100.png?text={quote(initial)}"

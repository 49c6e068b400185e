"""
startupconnect.database.seed — Default Community Seeder
=========================================================

A fresh install starts with one community per headline industry so the
communities page is never empty.

Idempotent — only inserts communities whose name doesn't exist yet.
Communities created or edited by members are never touched.
"""

from __future__ import annotations

import logging

from sqlalchemy import Engine, select

from startupconnect.database.engine import get_session
from startupconnect.database.models import Community

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Default communities catalogue
# ---------------------------------------------------------------------------
DEFAULT_COMMUNITIES: dict[str, tuple[str, str]] = {
    "seed-b2b-saas": (
        "SaaS Founders Circle",
        "B2B SaaS",
    ),
    "seed-climate": (
        "Climate Tech Builders",
        "Climate Tech",
    ),
    "seed-fintech": (
        "FinTech Forum",
        "FinTech",
    ),
    "seed-ai-ml": (
        "Applied AI Collective",
        "AI/ML",
    ),
}
"""Each entry maps ``community_id`` → ``(name, industry)``."""


def seed_default_communities(engine: Engine) -> int:
    """Insert any missing default communities.  Returns how many were added."""
    with get_session(engine) as session:
        existing = set(session.scalars(select(Community.name)).all())
        added = 0
        for community_id, (name, industry) in DEFAULT_COMMUNITIES.items():
            if name in existing:
                continue
            session.add(Community(
                id=community_id,
                name=name,
                description=f"A place for people working in {industry} to trade notes.",
                industry=industry,
                creator_id=None,
            ))
            added += 1

    if added:
        logger.info("Seeded %d default communities.", added)
    return added

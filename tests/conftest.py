"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import os

# ---------------------------------------------------------------------------
# Ensure a valid JWT_SECRET is always set for test runs.
# This must happen before any import of startupconnect.api.deps which
# validates the secret at module-load time.
# ---------------------------------------------------------------------------
_TEST_JWT_SECRET = "test-secret-for-pytest-only-" + "x" * 40  # > 32 chars
os.environ.setdefault("JWT_SECRET", _TEST_JWT_SECRET)

import pytest  # noqa: E402
from sqlalchemy import Engine, create_engine  # noqa: E402

# ---------------------------------------------------------------------------
# Make JSONB columns work in SQLite for testing.
# SQLite doesn't support JSONB natively, but SQLAlchemy's JSON type works.
# We register a custom type compiler so SQLite renders JSONB as TEXT.
# ---------------------------------------------------------------------------
from sqlalchemy.dialects.postgresql import JSONB as PG_JSONB  # noqa: E402

from startupconnect.config import AppConfig  # noqa: E402
from startupconnect.database.models import Base, UserRole  # noqa: E402

_jsonb_sqlite_registered = False


def _register_jsonb_sqlite_compat():
    """Register SQLite compilation for PG JSONB type (idempotent)."""
    global _jsonb_sqlite_registered
    if _jsonb_sqlite_registered:
        return
    from sqlalchemy.ext.compiler import compiles

    @compiles(PG_JSONB, "sqlite")
    def _compile_jsonb_as_text(type_, compiler, **kw):
        return "TEXT"

    _jsonb_sqlite_registered = True


_register_jsonb_sqlite_compat()


@pytest.fixture
def db_engine() -> Engine:
    """Create an in-memory SQLite engine with all StartupConnect tables.

    Uses StaticPool so all threads share the same in-memory database
    (required by ``asyncio.to_thread`` used by ``run_db``).
    """
    from sqlalchemy.pool import StaticPool

    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------
FOUNDER_PROFILE = {
    "startup_name": "Solarly",
    "industry": "Climate Tech",
    "funding_stage": "Seed",
    "bio": "Building rooftop solar for small businesses.",
    "location": "Bengaluru",
}

INVESTOR_PROFILE = {
    "investment_focus": ["Climate Tech", "FinTech"],
    "preferred_funding_stages": ["Seed", "Series A"],
    "bio": "Angel investor backing climate founders.",
    "location": "Mumbai",
}

EXPERT_PROFILE = {
    "area_of_expertise": "Fundraising",
    "years_of_experience": 12,
    "bio": "Helped 40 startups close their first round.",
    "location": "Chennai",
}


def make_user(
    engine: Engine,
    user_id: str,
    role: UserRole = UserRole.FOUNDER,
    name: str | None = None,
    profile: dict | None = None,
):
    """Sign a member up through the service and return its ``UserView``."""
    from startupconnect.services.user_service import create_user

    if profile is None:
        profile = {
            UserRole.FOUNDER: FOUNDER_PROFILE,
            UserRole.ANGEL_INVESTOR: INVESTOR_PROFILE,
            UserRole.VENTURE_CAPITALIST: INVESTOR_PROFILE,
            UserRole.INDUSTRY_EXPERT: EXPERT_PROFILE,
        }[role]
    return create_user(
        engine,
        email=f"{user_id}@example.com",
        name=name or user_id.capitalize(),
        role=role,
        profile=dict(profile),
        user_id=user_id,
    )


@pytest.fixture
def members(db_engine: Engine) -> dict[str, str]:
    """Three members: a founder (alice), an angel (bob), an expert (carol)."""
    make_user(db_engine, "alice", UserRole.FOUNDER)
    make_user(db_engine, "bob", UserRole.ANGEL_INVESTOR)
    make_user(db_engine, "carol", UserRole.INDUSTRY_EXPERT)
    return {"alice": "alice", "bob": "bob", "carol": "carol"}


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------
TEST_CONFIG = AppConfig(
    app_name="StartupConnect",
    tagline="Where founders meet their backers",
    api_port=8000,
    feed_page_size=20,
)


def make_token(sub: str = "alice") -> str:
    """Create a member JWT.  Usable as both a fixture helper and a factory."""
    import jwt

    from startupconnect.api.deps import JWT_ALGORITHM, JWT_SECRET

    return jwt.encode({"sub": sub}, JWT_SECRET, algorithm=JWT_ALGORITHM)


def auth(sub: str) -> dict:
    return {"Authorization": f"Bearer {make_token(sub)}"}


@pytest.fixture
def client(db_engine: Engine):
    """FastAPI TestClient wired to the in-memory database and a fixed config."""
    from fastapi.testclient import TestClient

    from startupconnect.api.deps import get_config, get_engine
    from startupconnect.api.main import app

    app.dependency_overrides[get_engine] = lambda: db_engine
    app.dependency_overrides[get_config] = lambda: TEST_CONFIG
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()

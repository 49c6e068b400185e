"""
startupconnect.database.engine — Database Connection & Async Helper
=====================================================================

The service layer is plain synchronous SQLAlchemy: every operation opens a
:class:`Session`, does its reads and conditional writes inside one
transaction, and commits.  Async callers hand those functions to
:func:`run_db`, which runs them on the default thread pool so an event loop
is never blocked on a database round trip.

Usage::

    from startupconnect.database.engine import create_db_engine, init_db, run_db

    engine = create_db_engine()          # reads DATABASE_URL from .env
    init_db(engine)                      # CREATE TABLE IF NOT EXISTS …

    # Inside an async handler:
    status = await run_db(send_request, engine, requester_id, target_id)
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from contextlib import contextmanager
from typing import ParamSpec, TypeVar

from sqlalchemy import Engine, create_engine
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from startupconnect.database.models import Base
from startupconnect.errors import StoreUnavailable, WriteConflict

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


# ---------------------------------------------------------------------------
# Engine creation
# ---------------------------------------------------------------------------
def create_db_engine() -> Engine:
    """Build a SQLAlchemy :class:`Engine` from the ``DATABASE_URL`` env var.

    Pool sizing:
    * ``pool_size=10`` — persistent connections for concurrent API workers.
    * ``max_overflow=20`` — extra connections under burst load.
    * ``pool_timeout=10`` — fail after 10 s if no connection is available.
    * ``pool_recycle=3600`` — recycle connections after 1 hour.

    Raises
    ------
    RuntimeError
        If ``DATABASE_URL`` is not set.
    """
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError(
            "DATABASE_URL is not set.  "
            "Copy .env.example → .env and set a valid PostgreSQL URL."
        )

    engine = create_engine(
        url,
        echo=False,        # Set True for SQL debugging
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,   # Reconnect stale connections automatically
        pool_timeout=10,
        pool_recycle=3600,
    )
    logger.info("Database engine created → %s", engine.url.host)
    return engine


# ---------------------------------------------------------------------------
# Schema initialization
# ---------------------------------------------------------------------------
def init_db(engine: Engine) -> None:
    """Create all tables and seed the default communities.

    Safe to call on every startup.  In production the schema is managed by
    Alembic (``alembic upgrade head``); ``create_all`` covers dev/test
    databases where migrations have not run.
    """
    Base.metadata.create_all(engine)
    logger.info("Database tables verified / created.")

    from startupconnect.database.seed import seed_default_communities

    seed_default_communities(engine)


# ---------------------------------------------------------------------------
# Session helper
# ---------------------------------------------------------------------------
@contextmanager
def get_session(engine: Engine):
    """Yield a :class:`Session` that auto-commits on success and rolls back
    on exception.

    Usage::

        with get_session(engine) as session:
            session.add(Community(id="c1", name="FinTech Builders", ...))
    """
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---------------------------------------------------------------------------
# Async bridge
# ---------------------------------------------------------------------------
async def run_db(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Run a **synchronous** service function on a background thread.

    ::

        post = await run_db(create_post, engine, author_id, text)
    """
    return await asyncio.to_thread(func, *args, **kwargs)


# ---------------------------------------------------------------------------
# Store failure translation
# ---------------------------------------------------------------------------
@contextmanager
def store_errors():
    """Translate database failures into the service error hierarchy.

    * ``StaleDataError`` (optimistic version check lost) → :class:`WriteConflict`
    * any other DBAPI failure → :class:`StoreUnavailable`

    Integrity violations the services did not anticipate are re-raised
    untouched.  Nothing is retried here; the caller decides.

    Works as a decorator too::

        @store_errors()
        def toggle_like(engine, post_id, user_id): ...
    """
    try:
        yield
    except StaleDataError as exc:
        logger.warning("Optimistic write conflict: %s", exc)
        raise WriteConflict() from exc
    except IntegrityError:
        raise
    except DBAPIError as exc:
        logger.exception("Database failure")
        raise StoreUnavailable() from exc

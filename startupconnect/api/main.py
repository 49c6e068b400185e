"""
startupconnect.api.main — FastAPI application entry point
===========================================================

Run with::

    uvicorn startupconnect.api.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from startupconnect import __version__  # noqa: E402
from startupconnect.api.deps import get_engine  # noqa: E402
from startupconnect.api.error_handlers import register_error_handlers  # noqa: E402
from startupconnect.api.routes.chats import router as chats_router  # noqa: E402
from startupconnect.api.routes.communities import router as communities_router  # noqa: E402
from startupconnect.api.routes.meta import router as meta_router  # noqa: E402
from startupconnect.api.routes.network import router as network_router  # noqa: E402
from startupconnect.api.routes.posts import router as posts_router  # noqa: E402
from startupconnect.api.routes.search import router as search_router  # noqa: E402
from startupconnect.api.routes.users import router as users_router  # noqa: E402
from startupconnect.database.engine import init_db  # noqa: E402

logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    """Resolve allowed CORS origins from env with safe defaults.

    Priority:
      1) CORS_ALLOW_ORIGINS (comma-separated)
      2) FRONTEND_URL (single origin)
    """
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if raw:
        return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]

    frontend_url = os.getenv("FRONTEND_URL", "").strip()
    if frontend_url:
        return [frontend_url.rstrip("/")]

    return []


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle: create tables, seed communities."""
    engine = get_engine()
    init_db(engine)
    logger.info("StartupConnect API started, engine ready (%s)", engine.url.database)
    yield
    logger.info("StartupConnect API shutting down")


app = FastAPI(
    title="StartupConnect API",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Mount routers
app.include_router(meta_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(network_router, prefix="/api")
app.include_router(posts_router, prefix="/api")
app.include_router(communities_router, prefix="/api")
app.include_router(chats_router, prefix="/api")
app.include_router(search_router, prefix="/api")


@app.get("/api/health")
def health():
    return {"status": "ok"}

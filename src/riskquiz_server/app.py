"""Application factory and CLI entry point.

``create_app()`` builds the FastAPI application with:
  - Lifespan handler that wires the SQL backends into a ``QuizRegistry``
  - CORS middleware
  - Global exception handlers (ValueError → 404/409/400, QuizError → 401/503)
  - All API routes mounted under ``/api/v1``
  - A ``/health`` endpoint for readiness probes

The ``cli()`` function is the ``riskquiz-server`` console-script entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from riskquiz_db.engine import dispose_engine, get_engine, get_session_factory
from riskquiz_db.repository import (
    SqlQuestionRepository,
    SqlResponseStore,
    SqlRiskTierLookup,
)
from riskquiz_engine.errors import QuizError

from riskquiz_server.config import ServerSettings, load_settings
from riskquiz_server.errors import (
    generic_error_handler,
    quiz_error_handler,
    value_error_handler,
)
from riskquiz_server.registry import QuizBackends, QuizRegistry
from riskquiz_server.routes import register_routes

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Lifespan: runs once at startup/shutdown
# ------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the quiz registry at startup, dispose the DB pool on shutdown.

    Backends passed to :func:`create_app` are used as-is; otherwise the
    SQLAlchemy adapters are wired to the shared session factory.
    """
    settings: ServerSettings = app.state.settings

    backends: QuizBackends | None = app.state.backends
    owns_database = backends is None
    if owns_database:
        factory = get_session_factory()
        backends = QuizBackends(
            questions=SqlQuestionRepository(factory),
            responses=SqlResponseStore(factory),
            tiers=SqlRiskTierLookup(factory),
        )

    app.state.owns_database = owns_database
    app.state.registry = QuizRegistry(backends, ttl_seconds=settings.quiz_session_ttl_seconds)
    logger.info("Quiz registry ready (ttl=%ss)", settings.quiz_session_ttl_seconds)

    yield

    # --- Shutdown ---
    if owns_database:
        await dispose_engine()
        logger.info("Database engine disposed")


# ------------------------------------------------------------------
# Factory
# ------------------------------------------------------------------

def create_app(
    settings: ServerSettings | None = None,
    backends: QuizBackends | None = None,
) -> FastAPI:
    """Build and return the configured FastAPI application."""
    if settings is None:
        settings = load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Risk Quiz API Server",
        description="REST API for the adaptive cancer-risk screening quiz",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Read by the lifespan handler
    app.state.settings = settings
    app.state.backends = backends

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Exception handlers ---
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(QuizError, quiz_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # --- Health check (outside /api/v1 prefix) ---
    @app.get("/health")
    async def health() -> dict:
        """Readiness probe — verifies DB connectivity when the DB is in use."""
        if not app.state.owns_database:
            return {"status": "ok"}
        try:
            async with get_engine().connect() as conn:
                await conn.execute(text("SELECT 1"))
            return {"status": "ok"}
        except Exception as exc:
            logger.error("Health check failed: %s", exc)
            return {"status": "error", "detail": "database unavailable"}

    register_routes(app)

    return app


# ------------------------------------------------------------------
# Module-level ASGI export (for uvicorn riskquiz_server.app:app)
# ------------------------------------------------------------------
app = create_app()


# ------------------------------------------------------------------
# CLI entry point
# ------------------------------------------------------------------

def cli() -> None:
    """Console-script entry point: ``riskquiz-server``."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "riskquiz_server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )

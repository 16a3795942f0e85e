"""Route registration — mounts all routers under ``/api/v1``."""

from fastapi import FastAPI

from riskquiz_server.routes.quiz import router as quiz_router
from riskquiz_server.routes.reference import router as reference_router

API_PREFIX = "/api/v1"


def register_routes(app: FastAPI) -> None:
    """Include all sub-routers under the versioned API prefix."""
    app.include_router(quiz_router, prefix=API_PREFIX)
    app.include_router(reference_router, prefix=API_PREFIX)

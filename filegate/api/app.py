"""
FastAPI application for filegate.

Wires storage → strategy registry → access engine at startup and exposes
the access decision over HTTP. Serving file bytes is left to the file
service; it puts `require_file_access()` in front of its own routes.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from filegate.access import FileAccessEngine, build_strategy_registry
from filegate.auth.context import AuthContext
from filegate.auth.guard import require_file_access
from filegate.config import get_settings
from filegate.integrations.sentry import init_sentry
from filegate.storage import StorageProvider, create_local_storage

logger = logging.getLogger(__name__)


# =============================================================================
# Response Models
# =============================================================================


class FileAccessResponse(BaseModel):
    file_id: str
    allowed: bool
    user_id: str | None = None


class HealthResponse(BaseModel):
    status: str
    environment: str


# =============================================================================
# App Setup
# =============================================================================


def create_app(storage: StorageProvider | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        storage: Storage backends to read from. Defaults to in-memory
            development storage.
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(level=settings.log_level.upper())

        if init_sentry():
            logger.info("Sentry error tracking enabled")

        app.state.storage = storage if storage is not None else create_local_storage()
        app.state.registry = build_strategy_registry(app.state.storage)
        app.state.engine = FileAccessEngine(app.state.storage.entities, app.state.registry)

        logger.info(f"filegate starting in {settings.environment} mode")

        yield

        logger.info("filegate shutting down")

    app = FastAPI(
        title="filegate",
        description="Access control for stored files",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Routes
    # =========================================================================

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", environment=settings.environment)

    @app.get("/files/{file_id}/access", response_model=FileAccessResponse)
    async def check_file_access(
        file_id: str,
        ctx: AuthContext = Depends(require_file_access()),
    ) -> FileAccessResponse:
        return FileAccessResponse(file_id=file_id, allowed=True, user_id=ctx.user_id)

    return app


app = create_app()

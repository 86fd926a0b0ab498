"""
File guard - the FastAPI side of file access control.

Usage:
    @app.get("/files/{file_id}")
    async def download(
        file_id: str,
        ctx: AuthContext = Depends(require_file_access()),
    ):
        ...

The dependency resolves the caller from the bearer token (if any), asks
the access engine, and turns a denial into 403 or 404.
"""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from filegate.access.engine import FileAccessEngine
from filegate.auth.context import AuthContext
from filegate.auth.jwt import TokenError, decode_token
from filegate.config import get_settings
from filegate.core.errors import AccessError

logger = logging.getLogger(__name__)


# =============================================================================
# JWT Token Handling
# =============================================================================


# Optional JWT bearer (doesn't fail if no token)
optional_bearer = HTTPBearer(auto_error=False)


async def get_user_from_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer),
) -> AuthContext:
    """
    Resolve the caller from the Authorization header.

    A missing or invalid token yields an anonymous context; whether that is
    enough is up to the engine (public files need no login).

    Handles:
    - Real JWT tokens (validated with secret)
    - Dev tokens like "user_123" or "dev_abc" outside production
    """
    if not credentials:
        return AuthContext.anonymous()

    token = credentials.credentials

    try:
        payload = decode_token(token, expected_type="access")
        return AuthContext(user_id=payload.sub, user_email=payload.email)
    except TokenError as e:
        logger.debug(f"Rejected bearer token: {e}")

    if not get_settings().is_production:
        if token.startswith("user_") or token.startswith("dev_"):
            return AuthContext(user_id=token)

    return AuthContext.anonymous()


# =============================================================================
# Dependency
# =============================================================================


def get_engine(request: Request) -> FileAccessEngine:
    """The engine built at startup (see filegate.api.app)."""
    return request.app.state.engine


def require_file_access(path_param: str = "file_id") -> Callable:
    """
    Require read access to the file named in the route path.

    Args:
        path_param: Name of the path parameter holding the file id

    Returns:
        FastAPI Depends that resolves to the caller's AuthContext
    """

    async def dependency(
        request: Request,
        ctx: AuthContext = Depends(get_user_from_token),
        engine: FileAccessEngine = Depends(get_engine),
    ) -> AuthContext:
        file_id = request.path_params.get(path_param)

        try:
            await engine.authorize(ctx, file_id)
        except AccessError as e:
            raise HTTPException(status_code=e.status_code, detail=e.detail)

        return ctx

    return dependency

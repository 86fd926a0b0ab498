"""
Authentication for file access.

The principal (AuthContext) and bearer token handling. The FastAPI
dependency lives in filegate.auth.guard:

    from filegate.auth.guard import require_file_access

    @app.get("/files/{file_id}")
    async def download(file_id: str, ctx: AuthContext = Depends(require_file_access())):
        ...
"""

from filegate.auth.context import AuthContext
from filegate.auth.jwt import (
    TokenPayload,
    TokenError,
    TokenExpiredError,
    TokenInvalidError,
    create_access_token,
    decode_token,
)

__all__ = [
    "AuthContext",
    "TokenPayload",
    "TokenError",
    "TokenExpiredError",
    "TokenInvalidError",
    "create_access_token",
    "decode_token",
]

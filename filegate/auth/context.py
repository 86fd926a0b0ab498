"""
Auth context - who is asking.

This is the lightweight principal handed to the access engine. An
anonymous context (no user id) can still read public files.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthContext:
    """
    The caller of a request.

    Usage in routes:
        async def my_route(ctx: AuthContext = Depends(require_file_access())):
            print(f"User {ctx.user_id} may read this file")
    """

    user_id: str | None = None
    user_email: str | None = None

    @property
    def is_authenticated(self) -> bool:
        """Is there a logged-in user?"""
        return self.user_id is not None

    @property
    def is_anonymous(self) -> bool:
        """Is this an anonymous request?"""
        return self.user_id is None

    @classmethod
    def anonymous(cls) -> AuthContext:
        """Create an anonymous context (no user)."""
        return cls()

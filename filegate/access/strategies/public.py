"""
Strategy for files any signed-in user may view (user avatars and banners).
"""

from __future__ import annotations

from filegate.access.strategies.base import FileAccessStrategy


class PublicAccessStrategy(FileAccessStrategy):
    """Always allows. Anonymous callers are turned away before this runs."""

    async def check_access(self, user_id: str, resource_id: str, file_id: str) -> bool:
        return True

"""
Base class for file access strategies.

A strategy decides access for one category of resource. Strategies are
stateless apart from the collaborators injected at construction, so a
single instance is shared by every request.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class FileAccessStrategy(ABC):
    """
    Base class for all file access strategies.

    Example:
        class OwnerOnlyStrategy(FileAccessStrategy):
            async def check_access(self, user_id, resource_id, file_id):
                if user_id != resource_id:
                    raise ForbiddenError("Access denied")
                return True
    """

    @abstractmethod
    async def check_access(self, user_id: str, resource_id: str, file_id: str) -> bool:
        """
        Decide whether `user_id` may read `file_id`.

        Args:
            user_id: The authenticated caller
            resource_id: The file's owning resource (meaning depends on type)
            file_id: The file being requested

        Returns:
            True. Denials are raised, never returned.

        Raises:
            ForbiddenError: Policy denies access
            NotFoundError: An entity needed for the decision is missing
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"

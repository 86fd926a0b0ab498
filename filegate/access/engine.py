"""
File access engine - decides whether a caller may retrieve a stored file.

Flow:
    file id → file metadata → public? allow
                            → scoped: authenticated? → strategy for the
                              resource type → allow / forbidden / not found

Only ForbiddenError and NotFoundError ever leave `authorize()`. Any other
failure is logged in full here and reported as "File not found".
"""

from __future__ import annotations

import logging

from filegate.access.registry import StrategyRegistry
from filegate.auth.context import AuthContext
from filegate.core.errors import AccessError, ForbiddenError, NotFoundError
from filegate.integrations.sentry import capture_exception
from filegate.storage.base import EntityStore

logger = logging.getLogger(__name__)


class FileAccessEngine:
    """
    Orchestrates a single access decision.

    Holds no per-request state; one instance serves all requests.
    """

    def __init__(self, entities: EntityStore, registry: StrategyRegistry):
        self.entities = entities
        self.registry = registry

    async def authorize(self, principal: AuthContext | None, file_id: str | None) -> bool:
        """
        Decide whether `principal` may retrieve `file_id`.

        Args:
            principal: The caller, or None for an unauthenticated request
            file_id: The requested file

        Returns:
            True when access is allowed

        Raises:
            ForbiddenError: The caller may not read this file
            NotFoundError: The file could not be resolved
        """
        if not file_id:
            raise NotFoundError("File ID not provided")

        try:
            return await self._authorize(principal, file_id)
        except AccessError:
            raise
        except Exception as e:
            logger.error(f"Error checking file access for file {file_id}", exc_info=True)
            capture_exception(e, file_id=file_id)
            raise NotFoundError("File not found") from None

    async def _authorize(self, principal: AuthContext | None, file_id: str) -> bool:
        file = await self.entities.find_file(file_id)

        if file.resource_id is None:
            logger.debug(f"File {file_id} has no resourceId, allowing access")
            return True

        if principal is None or principal.is_anonymous:
            logger.debug(f"Unauthenticated user attempted to access file {file_id}")
            raise ForbiddenError("Authentication required")

        strategy = self.registry.get(file.resource_type)
        if strategy is None:
            resource_type = file.resource_type.value if file.resource_type else None
            logger.warning(
                f"No strategy found for resource type {resource_type} for file {file_id}"
            )
            raise ForbiddenError("Access denied")

        return await strategy.check_access(principal.user_id, file.resource_id, file_id)

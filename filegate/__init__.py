"""
filegate - resource-scoped access control for stored files.

Given a request for a stored file, decide whether the caller may
retrieve it:

    engine = FileAccessEngine(storage.entities, build_strategy_registry(storage))
    await engine.authorize(AuthContext(user_id="u1"), "file_123")  # True or raises
"""

from filegate.access import (
    FileAccessEngine,
    StrategyRegistry,
    build_strategy_registry,
)
from filegate.auth.context import AuthContext
from filegate.core.errors import AccessError, ForbiddenError, NotFoundError
from filegate.core.models import ResourceType

__version__ = "0.1.0"

__all__ = [
    "FileAccessEngine",
    "StrategyRegistry",
    "build_strategy_registry",
    "AuthContext",
    "AccessError",
    "ForbiddenError",
    "NotFoundError",
    "ResourceType",
]

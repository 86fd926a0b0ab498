"""
File access control - the engine, its strategies and the registry that
ties resource types to strategies.
"""

from filegate.access.engine import FileAccessEngine
from filegate.access.registry import StrategyRegistry, build_strategy_registry
from filegate.access.strategies import (
    FileAccessStrategy,
    PublicAccessStrategy,
    CommunityMembershipStrategy,
    MessageAttachmentStrategy,
    ReplayClipAccessStrategy,
)

__all__ = [
    "FileAccessEngine",
    "StrategyRegistry",
    "build_strategy_registry",
    "FileAccessStrategy",
    "PublicAccessStrategy",
    "CommunityMembershipStrategy",
    "MessageAttachmentStrategy",
    "ReplayClipAccessStrategy",
]

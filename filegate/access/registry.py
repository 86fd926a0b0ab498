"""
Strategy registry.

Maps each resource type to the strategy that decides access for it.
Built once during application wiring and never changed afterwards, so it
can be shared by concurrent requests without locking.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Mapping

from filegate.access.strategies import (
    CommunityMembershipStrategy,
    FileAccessStrategy,
    MessageAttachmentStrategy,
    PublicAccessStrategy,
    ReplayClipAccessStrategy,
)
from filegate.core.errors import RegistryError
from filegate.core.models import ResourceType
from filegate.storage.base import StorageProvider

logger = logging.getLogger(__name__)


class StrategyRegistry:
    """
    Read-only lookup from resource type to access strategy.

    A type without a strategy is not an error here: `get()` returns None
    and the engine denies access.
    """

    def __init__(self, strategies: Mapping[ResourceType, FileAccessStrategy]):
        self._strategies = MappingProxyType(dict(strategies))

    @classmethod
    def from_groups(
        cls, groups: Iterable[tuple[FileAccessStrategy, Iterable[ResourceType]]]
    ) -> StrategyRegistry:
        """
        Build a registry from (strategy, resource types) pairs.

        Raises:
            RegistryError: A resource type is claimed by two strategies
        """
        strategies: dict[ResourceType, FileAccessStrategy] = {}
        for strategy, resource_types in groups:
            for resource_type in resource_types:
                if resource_type in strategies:
                    raise RegistryError(
                        f"Resource type '{resource_type.value}' is already mapped to "
                        f"{strategies[resource_type]!r}"
                    )
                strategies[resource_type] = strategy
        return cls(strategies)

    def get(self, resource_type: ResourceType | None) -> FileAccessStrategy | None:
        """Get the strategy for a resource type, or None if unmapped."""
        if resource_type is None:
            return None
        return self._strategies.get(resource_type)

    def __contains__(self, resource_type: object) -> bool:
        return resource_type in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)

    def resource_types(self) -> list[ResourceType]:
        """List all mapped resource types."""
        return list(self._strategies.keys())

    def missing_types(self) -> list[ResourceType]:
        """Resource types that have no strategy (empty if fully covered)."""
        return [t for t in ResourceType if t not in self._strategies]

    def report_coverage(self) -> list[ResourceType]:
        """Log a warning for any resource type without a strategy and return them."""
        missing = self.missing_types()
        if missing:
            logger.warning(
                f"No file access strategy for resource types {[t.value for t in missing]}; "
                "files of these types will be denied"
            )
        return missing


def build_strategy_registry(storage: StorageProvider) -> StrategyRegistry:
    """
    Wire the standard strategies to their resource types.

    One shared instance per strategy; the same instance serves every type
    in its group.
    """
    public = PublicAccessStrategy()
    community = CommunityMembershipStrategy(storage.memberships)
    message = MessageAttachmentStrategy(
        storage.entities,
        storage.memberships,
        storage.channel_memberships,
    )
    replay_clip = ReplayClipAccessStrategy(
        storage.entities,
        storage.memberships,
        storage.channel_memberships,
    )

    registry = StrategyRegistry.from_groups([
        (public, [ResourceType.USER_AVATAR, ResourceType.USER_BANNER]),
        (community, [
            ResourceType.COMMUNITY_AVATAR,
            ResourceType.COMMUNITY_BANNER,
            ResourceType.CUSTOM_EMOJI,
        ]),
        (message, [ResourceType.MESSAGE_ATTACHMENT]),
        (replay_clip, [ResourceType.REPLAY_CLIP]),
    ])

    registry.report_coverage()

    return registry

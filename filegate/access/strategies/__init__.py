"""
File access strategies, one per category of resource.
"""

from filegate.access.strategies.base import FileAccessStrategy
from filegate.access.strategies.public import PublicAccessStrategy
from filegate.access.strategies.community import CommunityMembershipStrategy
from filegate.access.strategies.message_attachment import MessageAttachmentStrategy
from filegate.access.strategies.replay_clip import ReplayClipAccessStrategy

__all__ = [
    "FileAccessStrategy",
    "PublicAccessStrategy",
    "CommunityMembershipStrategy",
    "MessageAttachmentStrategy",
    "ReplayClipAccessStrategy",
]

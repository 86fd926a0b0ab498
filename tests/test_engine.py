"""
Tests for the file access engine.

Outcomes are exactly: allowed (True), ForbiddenError, or NotFoundError.
"""

import logging
from unittest.mock import AsyncMock

import pytest

from filegate.access import (
    CommunityMembershipStrategy,
    FileAccessEngine,
    MessageAttachmentStrategy,
    PublicAccessStrategy,
    StrategyRegistry,
)
from filegate.auth.context import AuthContext
from filegate.core.errors import ForbiddenError, NotFoundError
from filegate.core.models import Channel, File, Message, ResourceType
from filegate.core.utils import utc_now
from filegate.storage.base import Collections


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def alice():
    return AuthContext(user_id="u1")


class ExplodingStrategy(PublicAccessStrategy):
    """Stands in for a strategy whose backing service fails."""

    async def check_access(self, user_id, resource_id, file_id):
        raise ConnectionError("db at 10.0.0.5 refused connection")


# =============================================================================
# Request validation and file resolution
# =============================================================================


class TestFileResolution:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("file_id", [None, ""])
    async def test_missing_file_id(self, engine, alice, file_id):
        with pytest.raises(NotFoundError) as exc:
            await engine.authorize(alice, file_id)

        assert exc.value.detail == "File ID not provided"

    @pytest.mark.asyncio
    async def test_unknown_file(self, engine, alice):
        with pytest.raises(NotFoundError) as exc:
            await engine.authorize(alice, "nope")

        assert exc.value.detail == "File not found"

    @pytest.mark.asyncio
    async def test_deleted_file(self, engine, entities, alice):
        await entities.save_file(File(id="f1", deleted_at=utc_now()))

        with pytest.raises(NotFoundError):
            await engine.authorize(alice, "f1")

    @pytest.mark.asyncio
    async def test_lookup_failure_hidden_as_not_found(self, alice):
        entities = AsyncMock()
        entities.find_file.side_effect = RuntimeError("connection reset by peer")
        engine = FileAccessEngine(entities, StrategyRegistry({}))

        with pytest.raises(NotFoundError) as exc:
            await engine.authorize(alice, "f1")

        assert exc.value.detail == "File not found"
        assert "connection" not in str(exc.value)


# =============================================================================
# Public files
# =============================================================================


class TestPublicFiles:
    @pytest.mark.asyncio
    async def test_anonymous_allowed(self, engine, entities):
        await entities.save_file(File(id="f1"))

        assert await engine.authorize(None, "f1") is True
        assert await engine.authorize(AuthContext.anonymous(), "f1") is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("resource_type", [None, *ResourceType])
    async def test_allowed_regardless_of_type(self, engine, entities, alice, resource_type):
        await entities.save_file(File(id="f1", resource_type=resource_type))

        assert await engine.authorize(alice, "f1") is True
        assert await engine.authorize(None, "f1") is True

    @pytest.mark.asyncio
    async def test_never_consults_registry(self, entities):
        await entities.save_file(File(id="f1", resource_type=ResourceType.MESSAGE_ATTACHMENT))
        registry = AsyncMock()
        engine = FileAccessEngine(entities, registry)

        assert await engine.authorize(None, "f1") is True
        registry.get.assert_not_called()


# =============================================================================
# Scoped files
# =============================================================================


class TestScopedFiles:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("resource_type", list(ResourceType))
    async def test_anonymous_requires_authentication(self, entities, resource_type):
        await entities.save_file(File(id="f1", resource_id="r1", resource_type=resource_type))
        strategy = AsyncMock()
        engine = FileAccessEngine(entities, StrategyRegistry({resource_type: strategy}))

        for principal in (None, AuthContext.anonymous()):
            with pytest.raises(ForbiddenError) as exc:
                await engine.authorize(principal, "f1")
            assert exc.value.detail == "Authentication required"

        strategy.check_access.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unmapped_type_denied(self, entities, alice):
        await entities.save_file(
            File(id="f1", resource_id="u1", resource_type=ResourceType.USER_BANNER)
        )
        registry = StrategyRegistry({ResourceType.USER_AVATAR: PublicAccessStrategy()})
        engine = FileAccessEngine(entities, registry)

        with pytest.raises(ForbiddenError) as exc:
            await engine.authorize(alice, "f1")

        assert exc.value.detail == "Access denied"

    @pytest.mark.asyncio
    async def test_missing_type_denied(self, engine, entities, alice):
        await entities.save_file(File(id="f1", resource_id="r1"))

        with pytest.raises(ForbiddenError) as exc:
            await engine.authorize(alice, "f1")

        assert exc.value.detail == "Access denied"

    @pytest.mark.asyncio
    async def test_strategy_receives_ids(self, entities, alice):
        await entities.save_file(
            File(id="f1", resource_id="c1", resource_type=ResourceType.CUSTOM_EMOJI)
        )
        strategy = AsyncMock()
        strategy.check_access.return_value = True
        engine = FileAccessEngine(entities, StrategyRegistry({ResourceType.CUSTOM_EMOJI: strategy}))

        assert await engine.authorize(alice, "f1") is True
        strategy.check_access.assert_awaited_once_with("u1", "c1", "f1")

    @pytest.mark.asyncio
    async def test_strategy_failure_hidden_as_not_found(self, entities, alice):
        await entities.save_file(
            File(id="f1", resource_id="u2", resource_type=ResourceType.USER_AVATAR)
        )
        engine = FileAccessEngine(
            entities, StrategyRegistry({ResourceType.USER_AVATAR: ExplodingStrategy()})
        )

        with pytest.raises(NotFoundError) as exc:
            await engine.authorize(alice, "f1")

        assert exc.value.detail == "File not found"

    @pytest.mark.asyncio
    async def test_unmapped_type_logs_warning(self, entities, alice, caplog):
        await entities.save_file(
            File(id="f1", resource_id="u1", resource_type=ResourceType.USER_BANNER)
        )
        engine = FileAccessEngine(entities, StrategyRegistry({}))

        with caplog.at_level(logging.WARNING, logger="filegate.access.engine"):
            with pytest.raises(ForbiddenError):
                await engine.authorize(alice, "f1")

        [record] = caplog.records
        assert record.levelno == logging.WARNING
        assert "No strategy found for resource type USER_BANNER" in record.getMessage()
        assert "f1" in record.getMessage()

    @pytest.mark.asyncio
    async def test_strategy_failure_logged_with_traceback(self, entities, alice, caplog):
        await entities.save_file(
            File(id="f1", resource_id="u2", resource_type=ResourceType.USER_AVATAR)
        )
        engine = FileAccessEngine(
            entities, StrategyRegistry({ResourceType.USER_AVATAR: ExplodingStrategy()})
        )

        with caplog.at_level(logging.ERROR, logger="filegate.access.engine"):
            with pytest.raises(NotFoundError):
                await engine.authorize(alice, "f1")

        [record] = caplog.records
        assert record.levelno == logging.ERROR
        assert "f1" in record.getMessage()
        assert record.exc_info is not None
        assert record.exc_info[0] is ConnectionError

    @pytest.mark.asyncio
    async def test_unknown_stored_type_denied(self, engine, storage, alice):
        await storage.metadata.save(
            Collections.FILES, "f1", {"id": "f1", "resource_id": "p1", "resource_type": "PODCAST"}
        )

        with pytest.raises(ForbiddenError) as exc:
            await engine.authorize(alice, "f1")

        assert exc.value.detail == "Access denied"

    @pytest.mark.asyncio
    async def test_user_avatar_allowed_for_any_user(self, engine, entities):
        await entities.save_file(
            File(id="f1", resource_id="u2", resource_type=ResourceType.USER_AVATAR)
        )

        assert await engine.authorize(AuthContext(user_id="stranger"), "f1") is True


# =============================================================================
# End-to-end scenarios
# =============================================================================


class TestScenarios:
    @pytest.mark.asyncio
    async def test_public_file_no_principal(self, engine, entities):
        await entities.save_file(File(id="f1", resource_id=None))

        assert await engine.authorize(None, "f1") is True

    @pytest.mark.asyncio
    async def test_community_banner_non_member(self, engine, entities, alice):
        await entities.save_file(
            File(id="f1", resource_id="c1", resource_type=ResourceType.COMMUNITY_BANNER)
        )

        with pytest.raises(ForbiddenError) as exc:
            await engine.authorize(alice, "f1")

        assert exc.value.detail == "You must be a member of this community to access this file"

    @pytest.mark.asyncio
    async def test_community_avatar_member(self, engine, storage, entities, alice):
        await storage.memberships.add_member("u1", "c1")
        await entities.save_file(
            File(id="f1", resource_id="c1", resource_type=ResourceType.COMMUNITY_AVATAR)
        )

        assert await engine.authorize(alice, "f1") is True

    @pytest.mark.asyncio
    async def test_private_channel_attachment_skips_community_check(self, entities, alice):
        await entities.save_file(
            File(id="f1", resource_id="m1", resource_type=ResourceType.MESSAGE_ATTACHMENT)
        )
        await entities.save_message(Message(id="m1", channel_id="ch1"))
        await entities.save_channel(Channel(id="ch1", community_id="c1", is_private=True))

        memberships = AsyncMock()
        channel_memberships = AsyncMock()
        channel_memberships.is_member.return_value = True
        registry = StrategyRegistry.from_groups([
            (CommunityMembershipStrategy(memberships), [ResourceType.COMMUNITY_BANNER]),
            (
                MessageAttachmentStrategy(entities, memberships, channel_memberships),
                [ResourceType.MESSAGE_ATTACHMENT],
            ),
        ])
        engine = FileAccessEngine(entities, registry)

        assert await engine.authorize(alice, "f1") is True
        channel_memberships.is_member.assert_awaited_once_with("u1", "ch1")
        memberships.is_member.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_attachment_message_missing(self, engine, entities, alice):
        await entities.save_file(
            File(id="f1", resource_id="m1", resource_type=ResourceType.MESSAGE_ATTACHMENT)
        )

        with pytest.raises(NotFoundError) as exc:
            await engine.authorize(alice, "f1")

        assert exc.value.detail == "Message not found"

    @pytest.mark.asyncio
    async def test_dm_attachment_non_participant(self, engine, storage, entities, alice):
        await entities.save_file(
            File(id="f1", resource_id="msgDM", resource_type=ResourceType.MESSAGE_ATTACHMENT)
        )
        await entities.save_message(Message(id="msgDM", direct_message_group_id="g1"))
        # Community membership has no bearing on DMs
        await storage.memberships.add_member("u1", "c1")

        with pytest.raises(ForbiddenError) as exc:
            await engine.authorize(alice, "f1")

        assert exc.value.detail == "You must be a member of this conversation to access this file"

    @pytest.mark.asyncio
    async def test_replay_clip_owner(self, engine, entities, alice):
        await entities.save_file(
            File(id="f1", resource_id="u1", resource_type=ResourceType.REPLAY_CLIP)
        )

        assert await engine.authorize(alice, "f1") is True

    @pytest.mark.asyncio
    async def test_replay_clip_stranger(self, engine, entities):
        await entities.save_file(
            File(id="f1", resource_id="u1", resource_type=ResourceType.REPLAY_CLIP)
        )

        with pytest.raises(ForbiddenError):
            await engine.authorize(AuthContext(user_id="u2"), "f1")

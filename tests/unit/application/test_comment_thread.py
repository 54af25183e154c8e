"""Unit tests for CommentThread and CommentThreadFactory."""

import pytest
import pytest_asyncio
from dishka import AsyncContainer

from portal.adapter.portal_api import InMemoryCommentBackend
from portal.application.thread import CommentThreadFactory
from portal.domain.error import InvalidScopeError
from portal.domain.gateway import CommentApi, PushChannel
from portal.domain.model import NewComment, PushEventName
from portal.domain.value import ActorType, CommentId, CommentScope, ScopeKind
from tests.conftest import STUDENT_SESSION, make_comment
from tests.harness import create_env_fixture

# Unit test fixture - in-memory comment API
unit_env = create_env_fixture()

SCOPE = CommentScope.for_announcement(1)


@pytest_asyncio.fixture
async def backend(unit_env: AsyncContainer) -> InMemoryCommentBackend:
    return await unit_env.get(InMemoryCommentBackend)


@pytest_asyncio.fixture
async def factory(unit_env: AsyncContainer) -> CommentThreadFactory:
    return await unit_env.get(CommentThreadFactory)


class TestCommentThread:
    """Tests for a thread wired through the container."""

    @pytest.mark.asyncio
    async def test_thread_lifecycle(self, unit_env, backend, factory):
        """Load, react, reply and receive pushed changes on one thread."""
        # Arrange
        backend.add(make_comment(1, actor_id=205))
        backend.add(make_comment(2, parent_id=1))
        channel = await unit_env.get(PushChannel)
        bindings = await unit_env.get(dict[ActorType, CommentApi])
        thread = factory.open(SCOPE, STUDENT_SESSION)
        notifications = []
        thread.subscribe(lambda store: notifications.append(store.forest))

        # Act
        await thread.refresh()
        await thread.like(CommentId(1))
        reply = await thread.reply(CommentId(2), "Thanks for the update")
        await channel.publish(
            PushEventName.COMMENT_REACTION_UPDATED.value,
            {"commentId": 1, "action": "added", "isCurrentUser": False},
        )
        admin_comment = await bindings[ActorType.ADMIN].create(
            NewComment(scope=SCOPE, text="Deadline moved to Friday")
        )
        await channel.publish(
            PushEventName.COMMENT_ADDED.value, {"announcementId": 1}
        )
        total = await thread.count()

        # Assert
        assert [c.id for c in thread.comments] == [1, admin_comment.id]
        root = thread.comments[0]
        assert root.reaction_count == 1
        assert root.viewer_reaction is not None
        assert reply.parent_id == 2
        assert [c.id for c in root.replies[0].replies] == [reply.comment.id]
        assert total == 4
        assert thread.loading is False
        assert thread.error is None
        assert notifications

    @pytest.mark.asyncio
    async def test_pushed_reaction_counts_before_reload(
        self, unit_env, backend, factory
    ):
        backend.add(make_comment(1, reaction_count=2))
        channel = await unit_env.get(PushChannel)
        thread = factory.open(SCOPE, STUDENT_SESSION)
        await thread.refresh()

        await channel.publish(
            PushEventName.COMMENT_REACTION_UPDATED.value,
            {"commentId": 1, "action": "added", "isCurrentUser": False},
        )

        assert thread.forest.find(CommentId(1)).reaction_count == 3

    @pytest.mark.asyncio
    async def test_detached_thread_ignores_channel(self, unit_env, backend, factory):
        backend.add(make_comment(1))
        channel = await unit_env.get(PushChannel)
        thread = factory.open(SCOPE, STUDENT_SESSION)
        await thread.refresh()

        thread.detach()
        await channel.publish(
            PushEventName.COMMENT_DELETED.value, {"commentId": 1}
        )

        assert thread.forest.contains(CommentId(1))

    @pytest.mark.asyncio
    async def test_role_override_per_call(self, backend, factory):
        """A call can act as another role than the thread's session resolves."""
        # Arrange
        backend.add(make_comment(1))
        thread = factory.open(SCOPE, STUDENT_SESSION, attach=False)

        # Act
        response = await thread.create_comment(
            "Posted by the registrar", role_hint=ActorType.ADMIN
        )

        # Assert
        assert response.comment.author.actor_type == ActorType.ADMIN
        assert backend.get(response.comment.id).author.actor_type == ActorType.ADMIN


class TestCommentThreadFactory:
    """Tests for opening threads by id."""

    @pytest.mark.asyncio
    async def test_open_for_calendar_event(self, backend, factory):
        backend.add(make_comment(1))
        backend.add(make_comment(2, calendar_event_id=7))

        thread = factory.open_for(STUDENT_SESSION, calendar_event_id=7)
        await thread.refresh()

        assert thread.scope.kind == ScopeKind.CALENDAR
        assert [c.id for c in thread.comments] == [2]
        assert thread.reconciler.attached is True

    @pytest.mark.asyncio
    async def test_open_for_needs_exactly_one_id(self, factory):
        with pytest.raises(InvalidScopeError):
            factory.open_for(STUDENT_SESSION)

        with pytest.raises(InvalidScopeError):
            factory.open_for(STUDENT_SESSION, announcement_id=1, calendar_event_id=7)

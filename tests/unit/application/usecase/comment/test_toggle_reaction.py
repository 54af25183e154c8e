"""Unit tests for ToggleReactionUseCase."""

import pytest
import pytest_asyncio
from dishka import AsyncContainer

from portal.adapter.error import NetworkError
from portal.adapter.portal_api import InMemoryCommentBackend
from portal.application.error import CommentOperationError
from portal.application.store import CommentStore
from portal.application.usecase.comment import (
    LoadCommentsRequest,
    LoadCommentsUseCase,
    ToggleReactionRequest,
    ToggleReactionUseCase,
)
from portal.domain.service import ServiceSelector, build_forest
from portal.domain.value import (
    ActorType,
    CommentId,
    CommentScope,
    ReactionId,
    ToggleAction,
)
from tests.conftest import STUDENT_SESSION, make_comment
from tests.di.api import STUDENT_ID
from tests.harness import create_env_fixture

# Unit test fixture - in-memory comment API
unit_env = create_env_fixture()

SCOPE = CommentScope.for_announcement(1)


@pytest_asyncio.fixture
async def backend(unit_env: AsyncContainer) -> InMemoryCommentBackend:
    return await unit_env.get(InMemoryCommentBackend)


@pytest_asyncio.fixture
async def selector(unit_env: AsyncContainer) -> ServiceSelector:
    return await unit_env.get(ServiceSelector)


@pytest_asyncio.fixture
async def store(backend, selector) -> CommentStore:
    """Thread with one comment that already has three reactions."""
    backend.add(make_comment(1, reaction_count=3))
    store = CommentStore(SCOPE)
    await LoadCommentsUseCase(store, selector).execute(
        LoadCommentsRequest(session=STUDENT_SESSION)
    )
    return store


def toggle(action: ToggleAction, **kwargs) -> ToggleReactionRequest:
    return ToggleReactionRequest(
        comment_id=CommentId(1), action=action, session=STUDENT_SESSION, **kwargs
    )


class TestToggleReaction:
    """Tests for ToggleReactionUseCase."""

    @pytest.mark.asyncio
    async def test_like_comment(self, backend, selector, store):
        """Liking should count the reaction and mark it as the viewer's."""
        # Arrange
        use_case = ToggleReactionUseCase(store, selector)

        # Act
        response = await use_case.execute(toggle(ToggleAction.LIKE))

        # Assert
        assert response.comment.reaction_count == 4
        assert response.comment.viewer_reaction.reaction_id == 1
        assert backend.reaction_count(CommentId(1)) == 4

    @pytest.mark.asyncio
    async def test_like_then_unlike_restores_count(self, backend, selector, store):
        use_case = ToggleReactionUseCase(store, selector)

        await use_case.execute(toggle(ToggleAction.LIKE))
        response = await use_case.execute(toggle(ToggleAction.UNLIKE))

        assert response.comment.reaction_count == 3
        assert response.comment.viewer_reaction is None
        assert backend.reaction_count(CommentId(1)) == 3

    @pytest.mark.asyncio
    async def test_custom_reaction_id(self, backend, selector, store):
        use_case = ToggleReactionUseCase(store, selector)

        response = await use_case.execute(
            toggle(ToggleAction.LIKE, reaction_id=ReactionId(2))
        )

        assert response.comment.viewer_reaction.reaction_id == 2
        viewer = backend.viewer_reaction(CommentId(1), (ActorType.STUDENT, STUDENT_ID))
        assert viewer.reaction_id == 2

    @pytest.mark.asyncio
    async def test_unlike_never_goes_below_zero(self, backend, selector):
        """A liked comment held with a zero count stays at zero when unliked."""
        # Arrange
        backend.add(make_comment(1))
        store = CommentStore(SCOPE)
        store.replace(build_forest([make_comment(1, liked=True)]))
        use_case = ToggleReactionUseCase(store, selector)

        # Act
        response = await use_case.execute(toggle(ToggleAction.UNLIKE))

        # Assert
        assert response.comment.reaction_count == 0
        assert response.comment.viewer_reaction is None

    @pytest.mark.asyncio
    async def test_failed_like_rolls_back(self, backend, selector, store):
        """A rejected like restores the comment as it was before the click."""
        # Arrange
        backend.fail_next("react", NetworkError("offline"))
        use_case = ToggleReactionUseCase(store, selector)

        # Act
        with pytest.raises(CommentOperationError) as exc_info:
            await use_case.execute(toggle(ToggleAction.LIKE))

        # Assert
        assert str(exc_info.value) == "Failed to like comment: offline"
        assert exc_info.value.operation == "like"
        assert exc_info.value.status_code is None
        held = store.forest.find(CommentId(1))
        assert held.reaction_count == 3
        assert held.viewer_reaction is None
        assert store.error is exc_info.value

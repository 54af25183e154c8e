"""Unit tests for DeleteCommentUseCase."""

import pytest
import pytest_asyncio
from dishka import AsyncContainer

from portal.adapter.portal_api import InMemoryCommentBackend
from portal.application.error import CommentOperationError
from portal.application.store import CommentStore
from portal.application.usecase.comment import (
    DeleteCommentRequest,
    DeleteCommentUseCase,
    LoadCommentsRequest,
    LoadCommentsUseCase,
)
from portal.domain.service import ServiceSelector
from portal.domain.value import CommentId, CommentScope
from tests.conftest import ADMIN_SESSION, STUDENT_SESSION, make_comment
from tests.harness import create_env_fixture

# Unit test fixture - in-memory comment API
unit_env = create_env_fixture()


@pytest_asyncio.fixture
async def backend(unit_env: AsyncContainer) -> InMemoryCommentBackend:
    return await unit_env.get(InMemoryCommentBackend)


@pytest_asyncio.fixture
async def selector(unit_env: AsyncContainer) -> ServiceSelector:
    return await unit_env.get(ServiceSelector)


@pytest_asyncio.fixture
async def store(backend, selector) -> CommentStore:
    backend.add(make_comment(1))
    backend.add(make_comment(2, parent_id=1))
    backend.add(make_comment(3, actor_id=205))
    store = CommentStore(CommentScope.for_announcement(1))
    await LoadCommentsUseCase(store, selector).execute(
        LoadCommentsRequest(session=STUDENT_SESSION)
    )
    return store


class TestDeleteComment:
    """Tests for DeleteCommentUseCase."""

    @pytest.mark.asyncio
    async def test_delete_top_level_comment(self, backend, selector, store):
        """Deleting a root comment removes it from the held forest."""
        # Arrange
        use_case = DeleteCommentUseCase(store, selector)

        # Act
        response = await use_case.execute(
            DeleteCommentRequest(comment_id=CommentId(1), session=STUDENT_SESSION)
        )

        # Assert
        assert response.removed_locally is True
        assert [c.id for c in store.comments] == [3]
        assert backend.get(CommentId(1)) is None

    @pytest.mark.asyncio
    async def test_deleted_reply_stays_until_next_load(self, backend, selector, store):
        """Only the root level is pruned locally."""
        # Arrange
        use_case = DeleteCommentUseCase(store, selector)

        # Act
        response = await use_case.execute(
            DeleteCommentRequest(comment_id=CommentId(2), session=STUDENT_SESSION)
        )

        # Assert
        assert response.removed_locally is False
        assert store.forest.contains(CommentId(2))
        assert backend.get(CommentId(2)) is None

    @pytest.mark.asyncio
    async def test_admin_can_delete_any_comment(self, selector, store):
        use_case = DeleteCommentUseCase(store, selector)

        response = await use_case.execute(
            DeleteCommentRequest(comment_id=CommentId(3), session=ADMIN_SESSION)
        )

        assert response.removed_locally is True
        assert [c.id for c in store.comments] == [1]

    @pytest.mark.asyncio
    async def test_delete_of_foreign_comment_fails(self, selector, store):
        use_case = DeleteCommentUseCase(store, selector)

        with pytest.raises(CommentOperationError) as exc_info:
            await use_case.execute(
                DeleteCommentRequest(comment_id=CommentId(3), session=STUDENT_SESSION)
            )

        assert exc_info.value.operation == "delete"
        assert exc_info.value.status_code == 403
        assert [c.id for c in store.comments] == [1, 3]

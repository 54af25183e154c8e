"""Unit tests for the in-memory comment API."""

import asyncio

import pytest

from portal.adapter.error import AuthError, NetworkError, ServerError
from portal.adapter.portal_api import InMemoryCommentApi, InMemoryCommentBackend
from portal.domain.model import NewComment
from portal.domain.value import (
    ActorId,
    ActorType,
    CommentId,
    CommentScope,
    FetchOptions,
    ReactionId,
    SortOrder,
)
from tests.conftest import make_comment

SCOPE = CommentScope.for_announcement(1)


@pytest.fixture
def backend() -> InMemoryCommentBackend:
    backend = InMemoryCommentBackend()
    backend.add(make_comment(1, reaction_count=2))
    backend.add(make_comment(2, parent_id=1))
    backend.add(make_comment(3, calendar_event_id=5))
    return backend


@pytest.fixture
def student(backend) -> InMemoryCommentApi:
    return InMemoryCommentApi(backend, ActorType.STUDENT, ActorId(100))


@pytest.fixture
def admin(backend) -> InMemoryCommentApi:
    return InMemoryCommentApi(backend, ActorType.ADMIN, ActorId(1))


class TestFetch:
    """Tests for listing."""

    @pytest.mark.asyncio
    async def test_lists_scope_in_order(self, student):
        page = await student.fetch_by_scope(SCOPE, FetchOptions())

        assert [c.id for c in page.comments] == [1, 2]
        assert page.pagination.total == 2

    @pytest.mark.asyncio
    async def test_paginates_and_sorts(self, student):
        page = await student.fetch_by_scope(
            SCOPE, FetchOptions(page=2, limit=1, sort_order=SortOrder.DESC)
        )

        assert [c.id for c in page.comments] == [1]
        assert page.pagination.total_pages == 2
        assert page.pagination.has_prev is True
        assert page.pagination.has_next is False


class TestMutations:
    """Tests for server-side behaviour of mutations."""

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_author(self, student):
        comment = await student.create(
            NewComment(scope=SCOPE, text="New", parent_id=CommentId(2))
        )

        assert comment.id == 4
        assert comment.parent_id == 2
        assert comment.author.actor_type == ActorType.STUDENT
        assert comment.author.actor_id == 100

    @pytest.mark.asyncio
    async def test_anonymous_create_hides_name(self, student):
        comment = await student.create(
            NewComment(scope=SCOPE, text="Secret", is_anonymous=True)
        )

        assert comment.author.is_anonymous is True
        assert comment.author.display_name is None

    @pytest.mark.asyncio
    async def test_create_with_parent_from_other_scope_fails(self, student):
        with pytest.raises(ServerError) as exc_info:
            await student.create(
                NewComment(scope=SCOPE, text="Wrong", parent_id=CommentId(3))
            )

        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_reactions_are_per_account(self, backend, student, admin):
        await student.react(CommentId(1), ReactionId(1))
        await admin.react(CommentId(1), ReactionId(2))

        student_view = (await student.fetch_by_scope(SCOPE, FetchOptions())).comments[0]
        assert student_view.reaction_count == 4
        assert student_view.viewer_reaction.reaction_id == 1

        await student.unreact(CommentId(1))
        admin_view = (await admin.fetch_by_scope(SCOPE, FetchOptions())).comments[0]
        assert admin_view.reaction_count == 3
        assert admin_view.viewer_reaction.reaction_id == 2

    @pytest.mark.asyncio
    async def test_only_author_may_edit(self, admin, student):
        with pytest.raises(AuthError):
            await admin.edit(CommentId(1), "Hijacked")

        edited = await student.edit(CommentId(1), "Fixed typo")
        assert edited.text == "Fixed typo"

    @pytest.mark.asyncio
    async def test_admin_may_delete_any_comment(self, backend, admin):
        await admin.delete(CommentId(2))

        assert backend.get(CommentId(2)) is None

    @pytest.mark.asyncio
    async def test_student_may_not_delete_others(self, backend):
        other = InMemoryCommentApi(backend, ActorType.STUDENT, ActorId(200))

        with pytest.raises(AuthError):
            await other.delete(CommentId(1))

    @pytest.mark.asyncio
    async def test_flag_marks_comment(self, backend, student):
        await student.flag(CommentId(1), "Off topic")

        assert backend.get(CommentId(1)).is_flagged is True
        assert backend.get(CommentId(1)).flag_reason == "Off topic"

    @pytest.mark.asyncio
    async def test_missing_comment_is_not_found(self, student):
        with pytest.raises(ServerError) as exc_info:
            await student.react(CommentId(99), ReactionId(1))

        assert exc_info.value.status_code == 404


class TestControls:
    """Tests for failure injection and held calls."""

    @pytest.mark.asyncio
    async def test_fail_next_fails_once(self, backend, student):
        backend.fail_next("react", NetworkError("offline"))

        with pytest.raises(NetworkError):
            await student.react(CommentId(1), ReactionId(1))
        await student.react(CommentId(1), ReactionId(1))

        assert [name for name, _ in backend.calls] == ["react", "react"]

    @pytest.mark.asyncio
    async def test_hold_blocks_until_released(self, backend, student):
        backend.hold("flag")
        task = asyncio.create_task(student.flag(CommentId(1), "Spam"))
        await asyncio.sleep(0)

        assert not task.done()
        assert backend.get(CommentId(1)).is_flagged is False

        backend.release("flag")
        await task
        assert backend.get(CommentId(1)).is_flagged is True

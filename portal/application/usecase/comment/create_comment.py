"""Create comment use case."""

from typing import Optional

import logfire
from pydantic import BaseModel

from portal.adapter.error import AdapterError
from portal.application.command import OptimisticCreate, run_optimistic
from portal.application.error import CommentOperationError
from portal.application.store import CommentStore
from portal.application.usecase.base import ThreadRequest, ThreadUseCase
from portal.application.usecase.comment.load_comments import (
    LoadCommentsRequest,
    LoadCommentsUseCase,
)
from portal.application.usecase.comment.validation import clean_text
from portal.domain.error import CommentCycleError
from portal.domain.gateway import TrustedClock
from portal.domain.model import Comment, NewComment
from portal.domain.service import ServiceSelector, redirect_parent
from portal.domain.value import (
    ActorId,
    ActorType,
    AnnouncementId,
    Author,
    CalendarEventId,
    CommentId,
    ScopeKind,
    ServerTime,
)


class CreateCommentRequest(ThreadRequest):
    """Create comment request."""

    text: str
    parent_id: Optional[CommentId] = None  # Parent comment ID for replies
    is_anonymous: bool = False


class CreateCommentResponse(BaseModel):
    """Create comment response."""

    comment: Comment
    parent_id: Optional[CommentId]  # Parent actually used, after redirection


class CreateCommentUseCase(ThreadUseCase):
    """Use case for creating a comment or a reply with an optimistic placeholder."""

    def __init__(
        self,
        store: CommentStore,
        selector: ServiceSelector,
        clock: TrustedClock,
        load_comments: LoadCommentsUseCase,
    ) -> None:
        """Initialize create comment use case.

        Args:
            store: Thread state to update
            selector: Resolves the role-scoped comment API
            clock: Trusted clock for placeholder ids and timestamps
            load_comments: Refreshes the thread once the comment exists
        """
        super().__init__(store, selector)
        self.clock = clock
        self.load_comments = load_comments

    async def execute(self, request: CreateCommentRequest) -> CreateCommentResponse:
        """Execute create comment flow.

        Steps:
        1. Validate text (before any network call)
        2. Redirect replies to over-deep comments to the thread root
        3. Show a pending placeholder stamped with server time
        4. Create through the resolved binding; on failure remove only
           this placeholder
        5. Refresh the scope so server nesting replaces the placeholder

        Raises:
            ValidationError: If the text is empty or too long
            CommentOperationError: If the create is rejected
        """
        text = clean_text(request.text)
        store = self.store

        with logfire.span(
            "create_comment",
            scope=str(store.scope),
            parent_id=request.parent_id,
        ):
            api = self.api_for(request)
            parent_id = self._target_parent(request.parent_id)

            try:
                now = await self.clock.get_current_time()
            except AdapterError as e:
                raise self.failed("create", e) from e

            placeholder = self._placeholder(
                now, text, parent_id, request.is_anonymous, api.actor_type
            )
            data = NewComment(
                scope=store.scope,
                text=text,
                parent_id=parent_id,
                is_anonymous=request.is_anonymous,
            )

            store.clear_error()
            try:
                created = await run_optimistic(
                    store, OptimisticCreate(placeholder), lambda: api.create(data)
                )
            except AdapterError as e:
                raise self.failed("create", e) from e

            logfire.info(
                "Comment created",
                comment_id=created.id,
                scope=str(store.scope),
                parent_id=parent_id,
            )
            await self._refresh(request)
            return CreateCommentResponse(comment=created, parent_id=parent_id)

    def _target_parent(self, parent_id: Optional[CommentId]) -> Optional[CommentId]:
        if parent_id is None:
            return None

        records = self.store.forest.flatten()
        parent = next((c for c in records if c.id == parent_id), None)
        if parent is None:
            return parent_id

        try:
            target = redirect_parent(parent, records)
        except CommentCycleError:
            return parent_id

        if target != parent_id:
            logfire.info(
                "Reply redirected to thread root",
                requested_parent_id=parent_id,
                parent_id=target,
            )
        return target

    def _placeholder(
        self,
        now: ServerTime,
        text: str,
        parent_id: Optional[CommentId],
        is_anonymous: bool,
        actor_type: ActorType,
    ) -> Comment:
        scope = self.store.scope
        placeholder_id = CommentId(now.unix)
        while self.store.forest.contains(placeholder_id):
            placeholder_id = CommentId(placeholder_id + 1)

        return Comment(
            id=placeholder_id,
            announcement_id=AnnouncementId(scope.id)
            if scope.kind == ScopeKind.ANNOUNCEMENT
            else None,
            calendar_event_id=CalendarEventId(scope.id)
            if scope.kind == ScopeKind.CALENDAR
            else None,
            parent_id=parent_id,
            author=Author(
                actor_type=actor_type,
                actor_id=ActorId(0),
                is_anonymous=is_anonymous,
            ),
            text=text,
            created_at=now.timestamp,
            updated_at=now.timestamp,
            pending=True,
        )

    async def _refresh(self, request: CreateCommentRequest) -> None:
        try:
            await self.load_comments.execute(
                LoadCommentsRequest(
                    session=request.session, role_hint=request.role_hint
                )
            )
        except CommentOperationError as e:
            # The comment exists; the confirmed record stays until the next load
            logfire.warn(
                "Refresh after create failed",
                scope=str(self.store.scope),
                error=str(e),
            )

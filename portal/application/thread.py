"""Comment thread facade.

A CommentThread is everything a page needs for the comments of one
announcement or calendar event: the held forest, the mutations, and the
realtime subscription. Each call acts as the thread's session unless a
session or role is passed explicitly.
"""

from typing import Optional

import logfire

from portal.application.realtime import CommentReconciler
from portal.application.store import CommentStore, Listener
from portal.application.usecase.comment import (
    CountCommentsRequest,
    CountCommentsUseCase,
    CreateCommentRequest,
    CreateCommentResponse,
    CreateCommentUseCase,
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
    EditCommentRequest,
    EditCommentResponse,
    EditCommentUseCase,
    FlagCommentRequest,
    FlagCommentResponse,
    FlagCommentUseCase,
    LoadCommentsRequest,
    LoadCommentsResponse,
    LoadCommentsUseCase,
    ToggleReactionRequest,
    ToggleReactionResponse,
    ToggleReactionUseCase,
)
from portal.domain.error import InvalidScopeError
from portal.domain.gateway import PushChannel, TrustedClock
from portal.domain.model import Comment, CommentForest
from portal.domain.service import ServiceSelector
from portal.domain.value import (
    ActorType,
    CommentId,
    CommentScope,
    FetchOptions,
    Pagination,
    ReactionId,
    SessionContext,
    ToggleAction,
)


class CommentThread:
    """Comments of one scope, as seen by one session."""

    def __init__(
        self,
        scope: CommentScope,
        selector: ServiceSelector,
        clock: TrustedClock,
        session: SessionContext,
        role_hint: Optional[ActorType] = None,
        fetch_options: Optional[FetchOptions] = None,
        default_reaction_id: ReactionId = ReactionId(1),
    ) -> None:
        """Initialize comment thread.

        Args:
            scope: Announcement or calendar event the thread belongs to
            selector: Resolves the role-scoped comment API
            clock: Trusted clock for optimistic placeholders
            session: Session the thread acts as by default
            role_hint: Role to act as, overriding session-based resolution
            fetch_options: Page size and sort used for loads
            default_reaction_id: Reaction applied by like()
        """
        self.session = session
        self.role_hint = role_hint
        self.store = CommentStore(scope)

        self._load = LoadCommentsUseCase(self.store, selector, fetch_options)
        self._create = CreateCommentUseCase(self.store, selector, clock, self._load)
        self._toggle = ToggleReactionUseCase(self.store, selector, default_reaction_id)
        self._edit = EditCommentUseCase(self.store, selector)
        self._delete = DeleteCommentUseCase(self.store, selector)
        self._flag = FlagCommentUseCase(self.store, selector)
        self._count = CountCommentsUseCase(self.store, selector)
        self.reconciler = CommentReconciler(self.store, self.refresh)

    # State

    @property
    def scope(self) -> CommentScope:
        return self.store.scope

    @property
    def forest(self) -> CommentForest:
        return self.store.forest

    @property
    def comments(self) -> tuple[Comment, ...]:
        return self.store.comments

    @property
    def pagination(self) -> Pagination:
        return self.store.pagination

    @property
    def loading(self) -> bool:
        return self.store.loading

    @property
    def error(self) -> Optional[Exception]:
        return self.store.error

    def subscribe(self, listener: Listener):
        """Register a listener called after every state change."""
        return self.store.subscribe(listener)

    # Operations

    async def refresh(
        self,
        session: Optional[SessionContext] = None,
        role_hint: Optional[ActorType] = None,
    ) -> LoadCommentsResponse:
        """Reload the first page, replacing everything held."""
        return await self.load_page(1, session=session, role_hint=role_hint)

    async def load_page(
        self,
        page: int,
        session: Optional[SessionContext] = None,
        role_hint: Optional[ActorType] = None,
    ) -> LoadCommentsResponse:
        return await self._load.execute(
            LoadCommentsRequest(page=page, **self._acting(session, role_hint))
        )

    async def create_comment(
        self,
        text: str,
        parent_id: Optional[CommentId] = None,
        is_anonymous: bool = False,
        session: Optional[SessionContext] = None,
        role_hint: Optional[ActorType] = None,
    ) -> CreateCommentResponse:
        return await self._create.execute(
            CreateCommentRequest(
                text=text,
                parent_id=parent_id,
                is_anonymous=is_anonymous,
                **self._acting(session, role_hint),
            )
        )

    async def reply(
        self,
        parent_id: CommentId,
        text: str,
        is_anonymous: bool = False,
        session: Optional[SessionContext] = None,
        role_hint: Optional[ActorType] = None,
    ) -> CreateCommentResponse:
        """Reply to a comment; over-deep parents are redirected to the thread root."""
        return await self.create_comment(
            text,
            parent_id=parent_id,
            is_anonymous=is_anonymous,
            session=session,
            role_hint=role_hint,
        )

    async def edit_comment(
        self,
        comment_id: CommentId,
        text: str,
        session: Optional[SessionContext] = None,
        role_hint: Optional[ActorType] = None,
    ) -> EditCommentResponse:
        return await self._edit.execute(
            EditCommentRequest(
                comment_id=comment_id, text=text, **self._acting(session, role_hint)
            )
        )

    async def delete_comment(
        self,
        comment_id: CommentId,
        session: Optional[SessionContext] = None,
        role_hint: Optional[ActorType] = None,
    ) -> DeleteCommentResponse:
        return await self._delete.execute(
            DeleteCommentRequest(
                comment_id=comment_id, **self._acting(session, role_hint)
            )
        )

    async def like(
        self,
        comment_id: CommentId,
        reaction_id: Optional[ReactionId] = None,
        session: Optional[SessionContext] = None,
        role_hint: Optional[ActorType] = None,
    ) -> ToggleReactionResponse:
        return await self._toggle.execute(
            ToggleReactionRequest(
                comment_id=comment_id,
                action=ToggleAction.LIKE,
                reaction_id=reaction_id,
                **self._acting(session, role_hint),
            )
        )

    async def unlike(
        self,
        comment_id: CommentId,
        session: Optional[SessionContext] = None,
        role_hint: Optional[ActorType] = None,
    ) -> ToggleReactionResponse:
        return await self._toggle.execute(
            ToggleReactionRequest(
                comment_id=comment_id,
                action=ToggleAction.UNLIKE,
                **self._acting(session, role_hint),
            )
        )

    async def flag(
        self,
        comment_id: CommentId,
        reason: str,
        session: Optional[SessionContext] = None,
        role_hint: Optional[ActorType] = None,
    ) -> FlagCommentResponse:
        return await self._flag.execute(
            FlagCommentRequest(
                comment_id=comment_id, reason=reason, **self._acting(session, role_hint)
            )
        )

    async def count(
        self,
        session: Optional[SessionContext] = None,
        role_hint: Optional[ActorType] = None,
    ) -> int:
        """Total comments in the scope, without loading them."""
        response = await self._count.execute(
            CountCommentsRequest(**self._acting(session, role_hint))
        )
        return response.total

    # Realtime

    def attach(self, channel: PushChannel) -> None:
        """Start merging pushed comment events into this thread."""
        self.reconciler.attach(channel)

    def detach(self) -> None:
        self.reconciler.detach()

    def _acting(
        self, session: Optional[SessionContext], role_hint: Optional[ActorType]
    ) -> dict:
        return {
            "session": session or self.session,
            "role_hint": role_hint or self.role_hint,
        }


class CommentThreadFactory:
    """Opens comment threads wired to the configured collaborators."""

    def __init__(
        self,
        selector: ServiceSelector,
        clock: TrustedClock,
        channel: Optional[PushChannel] = None,
        fetch_options: Optional[FetchOptions] = None,
        default_reaction_id: ReactionId = ReactionId(1),
    ) -> None:
        """Initialize comment thread factory.

        Args:
            selector: Resolves the role-scoped comment API
            clock: Trusted clock for optimistic placeholders
            channel: Push channel new threads attach to, if any
            fetch_options: Page size and sort used for loads
            default_reaction_id: Reaction applied by like()
        """
        self.selector = selector
        self.clock = clock
        self.channel = channel
        self.fetch_options = fetch_options
        self.default_reaction_id = default_reaction_id

    def open(
        self,
        scope: CommentScope,
        session: SessionContext,
        role_hint: Optional[ActorType] = None,
        attach: bool = True,
    ) -> CommentThread:
        """Open a thread for a scope, attached to the push channel by default."""
        thread = CommentThread(
            scope,
            self.selector,
            self.clock,
            session,
            role_hint=role_hint,
            fetch_options=self.fetch_options,
            default_reaction_id=self.default_reaction_id,
        )
        if attach and self.channel is not None:
            thread.attach(self.channel)
        logfire.debug(
            "Comment thread opened",
            scope=str(scope),
            role_hint=role_hint.value if role_hint else None,
        )
        return thread

    def open_for(
        self,
        session: SessionContext,
        announcement_id: Optional[int] = None,
        calendar_event_id: Optional[int] = None,
        role_hint: Optional[ActorType] = None,
    ) -> CommentThread:
        """Open a thread by announcement or calendar event id.

        Raises:
            InvalidScopeError: Unless exactly one id is given
        """
        if (announcement_id is None) == (calendar_event_id is None):
            raise InvalidScopeError(
                "Pass exactly one of announcement_id or calendar_event_id"
            )
        if announcement_id is not None:
            scope = CommentScope.for_announcement(announcement_id)
        else:
            scope = CommentScope.for_calendar_event(calendar_event_id)
        return self.open(scope, session, role_hint=role_hint)

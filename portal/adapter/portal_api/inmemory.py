"""In-memory comment API for testing and offline runs.

InMemoryCommentBackend plays the role of the portal server: it keeps flat
comment records and per-account reactions. InMemoryCommentApi is a
role-scoped binding over it, like HttpCommentApi over the REST API.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Optional

from portal.adapter.error import AdapterError, AuthError, ServerError
from portal.domain.gateway import CommentApi
from portal.domain.model import Comment, CommentPage, NewComment
from portal.domain.value import (
    ActorId,
    ActorType,
    AnnouncementId,
    Author,
    CalendarEventId,
    CommentId,
    CommentScope,
    FetchOptions,
    Pagination,
    ReactionId,
    ScopeKind,
    SortOrder,
    ViewerReaction,
)

Actor = tuple[ActorType, ActorId]


class InMemoryCommentBackend:
    """Server-side state shared by every in-memory binding."""

    def __init__(self, now: Optional[Callable[[], datetime]] = None) -> None:
        self._comments: dict[CommentId, Comment] = {}
        self._reactions: dict[CommentId, dict[Actor, ReactionId]] = {}
        self._seeded_counts: dict[CommentId, int] = {}
        self._next_id = 1
        self._failures: dict[str, list[AdapterError]] = {}
        self._holds: dict[str, asyncio.Event] = {}
        self.calls: list[tuple[str, tuple]] = []
        self.now = now or (lambda: datetime.now(timezone.utc))

    # Test controls

    def add(self, comment: Comment) -> Comment:
        """Store a record as if it had been created earlier."""
        record = comment.model_copy(
            update={"replies": (), "viewer_reaction": None, "pending": False}
        )
        self._comments[record.id] = record
        self._seeded_counts[record.id] = comment.reaction_count
        self._next_id = max(self._next_id, record.id + 1)
        return record

    def get(self, comment_id: CommentId) -> Optional[Comment]:
        return self._comments.get(comment_id)

    def fail_next(self, operation: str, error: AdapterError) -> None:
        """Make the next call of an operation raise error."""
        self._failures.setdefault(operation, []).append(error)

    def hold(self, operation: str) -> asyncio.Event:
        """Block calls of an operation until the returned event is set."""
        event = asyncio.Event()
        self._holds[operation] = event
        return event

    def release(self, operation: str) -> None:
        event = self._holds.pop(operation, None)
        if event is not None:
            event.set()

    # Server behaviour

    async def enter(self, operation: str, *args: object) -> None:
        self.calls.append((operation, args))
        event = self._holds.get(operation)
        if event is not None:
            await event.wait()
        pending = self._failures.get(operation)
        if pending:
            raise pending.pop(0)

    def reaction_count(self, comment_id: CommentId) -> int:
        seeded = self._seeded_counts.get(comment_id, 0)
        return seeded + len(self._reactions.get(comment_id, {}))

    def viewer_reaction(
        self, comment_id: CommentId, actor: Actor
    ) -> Optional[ViewerReaction]:
        reaction_id = self._reactions.get(comment_id, {}).get(actor)
        if reaction_id is None:
            return None
        return ViewerReaction(reaction_id=reaction_id)

    def list_scope(self, scope: CommentScope) -> list[Comment]:
        return [
            c for c in self._comments.values() if scope.matches(c) and not c.is_deleted
        ]

    def require(self, comment_id: CommentId) -> Comment:
        comment = self._comments.get(comment_id)
        if comment is None or comment.is_deleted:
            raise ServerError(f"Comment not found: {comment_id}", status_code=404)
        return comment

    def insert(self, data: NewComment, author: Author) -> Comment:
        if data.parent_id is not None:
            parent = self.require(data.parent_id)
            if not data.scope.matches(parent):
                raise ServerError(
                    "Parent comment does not belong to this thread", status_code=400
                )

        now = self.now()
        comment = Comment(
            id=CommentId(self._next_id),
            announcement_id=AnnouncementId(data.scope.id)
            if data.scope.kind == ScopeKind.ANNOUNCEMENT
            else None,
            calendar_event_id=CalendarEventId(data.scope.id)
            if data.scope.kind == ScopeKind.CALENDAR
            else None,
            parent_id=data.parent_id,
            author=author,
            text=data.text,
            created_at=now,
            updated_at=now,
        )
        self._next_id += 1
        self._comments[comment.id] = comment
        return comment

    def replace(self, comment: Comment) -> None:
        self._comments[comment.id] = comment

    def remove(self, comment_id: CommentId) -> None:
        self._comments.pop(comment_id, None)
        self._reactions.pop(comment_id, None)
        self._seeded_counts.pop(comment_id, None)

    def set_reaction(
        self, comment_id: CommentId, actor: Actor, reaction_id: Optional[ReactionId]
    ) -> None:
        reactions = self._reactions.setdefault(comment_id, {})
        if reaction_id is None:
            reactions.pop(actor, None)
        else:
            reactions[actor] = reaction_id


class InMemoryCommentApi(CommentApi):
    """Role-scoped binding over an InMemoryCommentBackend."""

    def __init__(
        self,
        backend: InMemoryCommentBackend,
        actor_type: ActorType,
        actor_id: ActorId = ActorId(1),
        display_name: Optional[str] = None,
    ) -> None:
        self.backend = backend
        self._actor_type = actor_type
        self.actor_id = actor_id
        self.display_name = display_name or f"{actor_type.value.title()} {actor_id}"

    @property
    def actor_type(self) -> ActorType:
        return self._actor_type

    @property
    def actor(self) -> Actor:
        return (self._actor_type, self.actor_id)

    def _view(self, comment: Comment) -> Comment:
        return comment.model_copy(
            update={
                "reaction_count": self.backend.reaction_count(comment.id),
                "viewer_reaction": self.backend.viewer_reaction(comment.id, self.actor),
            }
        )

    async def fetch_by_scope(
        self, scope: CommentScope, options: FetchOptions
    ) -> CommentPage:
        await self.backend.enter("fetch", scope, options)
        comments = sorted(
            self.backend.list_scope(scope),
            key=lambda c: (c.created_at, c.id),
            reverse=options.sort_order == SortOrder.DESC,
        )
        total = len(comments)
        total_pages = (total + options.limit - 1) // options.limit
        start = (options.page - 1) * options.limit
        page = comments[start : start + options.limit]
        return CommentPage(
            comments=tuple(self._view(c) for c in page),
            pagination=Pagination(
                page=options.page,
                limit=options.limit,
                total=total,
                total_pages=total_pages,
                has_next=options.page < total_pages,
                has_prev=options.page > 1,
            ),
        )

    async def create(self, data: NewComment) -> Comment:
        await self.backend.enter("create", data)
        author = Author(
            actor_type=self._actor_type,
            actor_id=self.actor_id,
            display_name=None if data.is_anonymous else self.display_name,
            is_anonymous=data.is_anonymous,
        )
        return self._view(self.backend.insert(data, author))

    async def edit(self, comment_id: CommentId, text: str) -> Comment:
        await self.backend.enter("edit", comment_id, text)
        comment = self.backend.require(comment_id)
        if (comment.author.actor_type, comment.author.actor_id) != self.actor:
            raise AuthError("You can only edit your own comments", status_code=403)
        updated = comment.model_copy(
            update={"text": text, "updated_at": self.backend.now()}
        )
        self.backend.replace(updated)
        return self._view(updated)

    async def delete(self, comment_id: CommentId) -> None:
        await self.backend.enter("delete", comment_id)
        comment = self.backend.require(comment_id)
        is_author = (comment.author.actor_type, comment.author.actor_id) == self.actor
        if not is_author and self._actor_type != ActorType.ADMIN:
            raise AuthError("You can only delete your own comments", status_code=403)
        self.backend.remove(comment_id)

    async def react(self, comment_id: CommentId, reaction_id: ReactionId) -> None:
        await self.backend.enter("react", comment_id, reaction_id)
        self.backend.require(comment_id)
        self.backend.set_reaction(comment_id, self.actor, reaction_id)

    async def unreact(self, comment_id: CommentId) -> None:
        await self.backend.enter("unreact", comment_id)
        self.backend.require(comment_id)
        self.backend.set_reaction(comment_id, self.actor, None)

    async def flag(self, comment_id: CommentId, reason: str) -> None:
        await self.backend.enter("flag", comment_id, reason)
        comment = self.backend.require(comment_id)
        self.backend.replace(
            comment.model_copy(update={"is_flagged": True, "flag_reason": reason})
        )

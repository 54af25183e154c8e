"""Merges pushed comment events into a thread's held state.

The push channel is advisory: events may arrive twice, out of order, or for
comments that are not held. Every handler is an idempotent upsert, and a
handler never raises; anything it cannot apply is logged and dropped since
a reload always restores the authoritative state.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Optional

import logfire
from pydantic import ValidationError as PayloadError

from portal.adapter.portal_api.mappers import (
    DEFAULT_REACTION_ID,
    comment_changes_from_wire,
)
from portal.application.store import CommentStore
from portal.domain.gateway import EventHandler, PushChannel, align_timestamp
from portal.domain.model import (
    Comment,
    CommentAddedEvent,
    CommentDeletedEvent,
    CommentReactionUpdatedEvent,
    CommentUpdatedEvent,
    PushEventName,
)
from portal.domain.value import ReactionAction, ViewerReaction

Refresh = Callable[[], Awaitable[Any]]


class CommentReconciler:
    """Applies comment-* push events to one thread's store."""

    def __init__(self, store: CommentStore, refresh: Refresh) -> None:
        """Initialize comment reconciler.

        Args:
            store: Thread state events are merged into
            refresh: Reloads the thread from the comment API
        """
        self.store = store
        self.refresh = refresh
        self._channel: Optional[PushChannel] = None
        self._handlers: dict[str, EventHandler] = {
            PushEventName.COMMENT_ADDED.value: self.on_comment_added,
            PushEventName.COMMENT_UPDATED.value: self.on_comment_updated,
            PushEventName.COMMENT_DELETED.value: self.on_comment_deleted,
            PushEventName.COMMENT_REACTION_UPDATED.value: self.on_reaction_updated,
        }

    @property
    def attached(self) -> bool:
        return self._channel is not None

    def attach(self, channel: PushChannel) -> None:
        """Subscribe to the comment events of a channel."""
        if self._channel is channel:
            return
        self.detach()
        for event, handler in self._handlers.items():
            channel.on(event, handler)
        self._channel = channel
        logfire.debug("Reconciler attached", scope=str(self.store.scope))

    def detach(self) -> None:
        channel = self._channel
        if channel is None:
            return
        for event, handler in self._handlers.items():
            channel.off(event, handler)
        self._channel = None
        logfire.debug("Reconciler detached", scope=str(self.store.scope))

    async def on_comment_added(self, payload: dict[str, Any]) -> None:
        """Reload the thread when a comment was added to its scope.

        The payload does not say where a reply lands in the depth-bounded
        forest, so the forest is rebuilt from a fresh fetch.
        """
        event = self._parse(CommentAddedEvent, PushEventName.COMMENT_ADDED, payload)
        if event is None or not event.in_scope(self.store.scope):
            return

        logfire.info("Comment added remotely, reloading", scope=str(self.store.scope))
        try:
            await self.refresh()
        except Exception as e:
            logfire.warn(
                "Reload after comment-added failed",
                scope=str(self.store.scope),
                error=str(e),
            )

    async def on_comment_updated(self, payload: dict[str, Any]) -> None:
        """Merge a partial update into the matching comment."""
        event = self._parse(CommentUpdatedEvent, PushEventName.COMMENT_UPDATED, payload)
        if event is None:
            return

        current = self.store.forest.find(event.comment_id)
        if current is None:
            logfire.debug("Update for a comment not held", comment_id=event.comment_id)
            return

        try:
            merged = self._merge(current, event.updates)
        except (PayloadError, TypeError, ValueError) as e:
            logfire.warn(
                "Invalid comment update ignored",
                comment_id=event.comment_id,
                error=str(e),
            )
            return

        if merged is None or self._is_stale(current, merged):
            return
        self.store.update(
            lambda forest: forest.update(event.comment_id, lambda _: merged)
        )

    async def on_comment_deleted(self, payload: dict[str, Any]) -> None:
        """Remove the matching comment at whatever level holds it."""
        event = self._parse(CommentDeletedEvent, PushEventName.COMMENT_DELETED, payload)
        if event is None:
            return
        self.store.update(lambda forest: forest.remove(event.comment_id))

    async def on_reaction_updated(self, payload: dict[str, Any]) -> None:
        """Shift the reaction count; the viewer's own reaction only for own events."""
        event = self._parse(
            CommentReactionUpdatedEvent,
            PushEventName.COMMENT_REACTION_UPDATED,
            payload,
        )
        if event is None:
            return

        def apply(comment: Comment) -> Comment:
            added = event.action == ReactionAction.ADDED
            if not event.is_current_user:
                return comment.with_reaction_delta(1 if added else -1)
            if added == comment.has_viewer_reaction:
                # Echo of a change already applied locally
                return comment
            if not added:
                return comment.unliked()
            return comment.liked(
                ViewerReaction(reaction_id=event.reaction_id or DEFAULT_REACTION_ID)
            )

        self.store.update(lambda forest: forest.update(event.comment_id, apply))

    def _parse(self, model: Any, name: PushEventName, payload: Any) -> Any:
        try:
            return model.model_validate(payload)
        except PayloadError as e:
            logfire.warn(
                "Malformed push event ignored",
                push_event=name.value,
                error=str(e),
            )
            return None

    @staticmethod
    def _merge(current: Comment, updates: dict[str, Any]) -> Optional[Comment]:
        changes = comment_changes_from_wire(updates, current)
        if not changes:
            return None

        merged = Comment.model_validate(
            {**current.model_dump(exclude={"replies"}), **changes}
        )
        # Pushed timestamps may lack a timezone; read them in the held one
        updated_at = align_timestamp(merged.updated_at, current.updated_at)
        return merged.model_copy(
            update={"updated_at": updated_at, "replies": current.replies}
        )

    @staticmethod
    def _is_stale(current: Comment, merged: Comment) -> bool:
        if merged.updated_at >= current.updated_at:
            return False
        logfire.info(
            "Stale comment update rejected",
            comment_id=current.id,
            held_updated_at=current.updated_at.isoformat(),
            update_updated_at=merged.updated_at.isoformat(),
        )
        return True

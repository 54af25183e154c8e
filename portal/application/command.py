"""Optimistic mutations.

An optimistic mutation changes the local forest before the comment API
confirms it, and undoes exactly its own change if the call is rejected:

    snapshot -> apply -> call -> commit | rollback

Each mutation snapshots only its own target, so concurrent mutations on
different comments cannot undo each other.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any, Optional, TypeVar

import logfire

from portal.application.store import CommentStore
from portal.domain.model import Comment, CommentForest
from portal.domain.value import CommentId, ToggleAction, ViewerReaction

T = TypeVar("T")


class OptimisticMutation(ABC):
    """Command shell shared by optimistic comment mutations."""

    @abstractmethod
    def snapshot(self, forest: CommentForest) -> None:
        """Capture what rollback needs, right before apply."""
        pass

    @abstractmethod
    def apply(self, forest: CommentForest) -> CommentForest:
        """Local change shown while the call is in flight."""
        pass

    def commit(self, forest: CommentForest, result: Any) -> CommentForest:
        """Final local state once the call succeeded."""
        return forest

    @abstractmethod
    def rollback(self, forest: CommentForest) -> CommentForest:
        """Undo apply on whatever the forest looks like now."""
        pass


async def run_optimistic(
    store: CommentStore,
    mutation: OptimisticMutation,
    call: Callable[[], Awaitable[T]],
) -> T:
    """Apply a mutation, await the call, then commit or roll back.

    Raises:
        Whatever call raised, after the rollback was applied
    """
    mutation.snapshot(store.forest)
    store.update(mutation.apply)
    try:
        result = await call()
    except Exception as e:
        logfire.warn(
            "Optimistic mutation rolled back",
            mutation=type(mutation).__name__,
            error=str(e),
        )
        store.update(mutation.rollback)
        raise
    store.update(lambda forest: mutation.commit(forest, result))
    return result


class OptimisticCreate(OptimisticMutation):
    """Shows a pending placeholder until the created comment is known."""

    def __init__(self, placeholder: Comment) -> None:
        self.placeholder = placeholder
        self.inserted = False

    def snapshot(self, forest: CommentForest) -> None:
        # Nothing to capture: rollback only removes this placeholder
        self.inserted = False

    def apply(self, forest: CommentForest) -> CommentForest:
        parent_id = self.placeholder.parent_id
        if parent_id is None:
            self.inserted = True
            return forest.prepend_root(self.placeholder)

        forest, self.inserted = forest.append_reply(parent_id, self.placeholder)
        if not self.inserted:
            logfire.debug(
                "Parent not held locally, placeholder not shown",
                parent_id=parent_id,
            )
        return forest

    def commit(self, forest: CommentForest, result: Any) -> CommentForest:
        if not isinstance(result, Comment) or forest.contains(result.id):
            return self.rollback(forest)
        return forest.update(
            self.placeholder.id,
            lambda held: result.model_copy(update={"replies": held.replies}),
        )

    def rollback(self, forest: CommentForest) -> CommentForest:
        return forest.remove_pending(self.placeholder.id, self.placeholder.parent_id)


class OptimisticReaction(OptimisticMutation):
    """Likes or unlikes a comment ahead of the API call."""

    def __init__(
        self,
        comment_id: CommentId,
        action: ToggleAction,
        reaction: Optional[ViewerReaction] = None,
    ) -> None:
        if action == ToggleAction.LIKE and reaction is None:
            raise ValueError("A like needs the reaction to apply")
        self.comment_id = comment_id
        self.action = action
        self.reaction = reaction
        self.before: Optional[Comment] = None

    def snapshot(self, forest: CommentForest) -> None:
        held = forest.find(self.comment_id)
        self.before = held.without_replies() if held is not None else None

    def apply(self, forest: CommentForest) -> CommentForest:
        if self.action == ToggleAction.LIKE:
            return forest.update(self.comment_id, lambda c: c.liked(self.reaction))
        return forest.update(self.comment_id, lambda c: c.unliked())

    def rollback(self, forest: CommentForest) -> CommentForest:
        before = self.before
        if before is None:
            return forest
        # Replies may have changed meanwhile; only the comment itself reverts
        return forest.update(
            self.comment_id,
            lambda held: before.model_copy(update={"replies": held.replies}),
        )

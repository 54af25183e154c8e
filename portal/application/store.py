"""Client-side state of one comment thread."""

from collections.abc import Callable
from typing import Optional

import logfire

from portal.domain.model import Comment, CommentForest
from portal.domain.value import CommentScope, Pagination

Listener = Callable[["CommentStore"], None]


class CommentStore:
    """Holds the comment forest of one scope and notifies subscribers.

    The forest is immutable, so every change is a single assignment of a new
    forest: readers never see a half-applied update.
    """

    def __init__(self, scope: CommentScope) -> None:
        self.scope = scope
        self.forest = CommentForest.empty()
        self.pagination = Pagination()
        self.loading = False
        self.error: Optional[Exception] = None
        self.session_identity: Optional[str] = None
        self._listeners: list[Listener] = []

    @property
    def comments(self) -> tuple[Comment, ...]:
        return self.forest.roots

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener.

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def replace(
        self, forest: CommentForest, pagination: Optional[Pagination] = None
    ) -> None:
        """Swap in a new forest (and page metadata, when given)."""
        if forest is self.forest and pagination is None:
            return
        self.forest = forest
        if pagination is not None:
            self.pagination = pagination
        self._notify()

    def update(self, fn: Callable[[CommentForest], CommentForest]) -> None:
        """Replace the forest with fn(current forest)."""
        self.replace(fn(self.forest))

    def set_loading(self, loading: bool) -> None:
        self.loading = loading
        self._notify()

    def fail(self, error: Exception) -> None:
        self.error = error
        self._notify()

    def clear_error(self) -> None:
        self.error = None

    def reset(self) -> None:
        """Drop everything held for the scope."""
        self.forest = CommentForest.empty()
        self.pagination = Pagination()
        self.error = None
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logfire.error(
                    "Comment store listener failed",
                    scope=str(self.scope),
                    error=str(e),
                )

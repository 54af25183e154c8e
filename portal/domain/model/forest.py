"""Comment forest.

The forest is the rendered view of one scope: ordered root comments, each
carrying its (depth-bounded) replies. It is immutable; every edit returns a
new forest, so holders swap whole forests instead of writing fields in place.
"""

from collections.abc import Callable, Iterator
from typing import Any, Optional

from portal.domain.model.comment import Comment
from portal.domain.model.common import DomainModel
from portal.domain.value import CommentId


def _update_in(
    comments: tuple[Comment, ...],
    comment_id: CommentId,
    fn: Callable[[Comment], Comment],
) -> tuple[tuple[Comment, ...], bool]:
    for index, comment in enumerate(comments):
        if comment.id == comment_id:
            updated = fn(comment)
            if updated is comment:
                return comments, False
            return comments[:index] + (updated,) + comments[index + 1 :], True
        if comment.replies:
            replies, changed = _update_in(comment.replies, comment_id, fn)
            if changed:
                updated = comment.model_copy(update={"replies": replies})
                return comments[:index] + (updated,) + comments[index + 1 :], True
    return comments, False


def _remove_in(
    comments: tuple[Comment, ...],
    predicate: Callable[[Comment], bool],
) -> tuple[tuple[Comment, ...], bool]:
    kept: list[Comment] = []
    changed = False
    for comment in comments:
        if predicate(comment):
            changed = True
            continue
        if comment.replies:
            replies, replies_changed = _remove_in(comment.replies, predicate)
            if replies_changed:
                comment = comment.model_copy(update={"replies": replies})
                changed = True
        kept.append(comment)
    return tuple(kept), changed


class CommentForest(DomainModel):
    """Ordered root comments of one scope with their nested replies."""

    roots: tuple[Comment, ...] = ()

    @classmethod
    def empty(cls) -> "CommentForest":
        return cls()

    def walk(self) -> Iterator[Comment]:
        """Yield every comment depth-first, parents before their replies."""
        stack = list(reversed(self.roots))
        while stack:
            comment = stack.pop()
            yield comment
            stack.extend(reversed(comment.replies))

    def find(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment at any rendered level."""
        for comment in self.walk():
            if comment.id == comment_id:
                return comment
        return None

    def contains(self, comment_id: CommentId) -> bool:
        return self.find(comment_id) is not None

    def flatten(self) -> list[Comment]:
        """Flat records in depth-first order, replies stripped."""
        return [comment.without_replies() for comment in self.walk()]

    def count(self) -> int:
        return sum(1 for _ in self.walk())

    def prepend_root(self, comment: Comment) -> "CommentForest":
        return CommentForest(roots=(comment,) + self.roots)

    def append_reply(
        self, parent_id: CommentId, comment: Comment
    ) -> tuple["CommentForest", bool]:
        """Append a reply under a parent found at any level.

        Returns:
            The new forest and whether the parent was found
        """
        roots, changed = _update_in(
            self.roots,
            parent_id,
            lambda parent: parent.model_copy(
                update={"replies": parent.replies + (comment,)}
            ),
        )
        if not changed:
            return self, False
        return CommentForest(roots=roots), True

    def update(
        self, comment_id: CommentId, fn: Callable[[Comment], Comment]
    ) -> "CommentForest":
        """Replace one comment with fn(comment).

        The same forest is returned when the comment is absent or fn returns
        it unchanged.
        """
        roots, changed = _update_in(self.roots, comment_id, fn)
        return CommentForest(roots=roots) if changed else self

    def patch(self, comment_id: CommentId, **fields: Any) -> "CommentForest":
        """Merge field values into one comment."""
        return self.update(comment_id, lambda c: c.model_copy(update=fields))

    def remove(self, comment_id: CommentId) -> "CommentForest":
        """Remove a comment (and the replies it carries) at any level."""
        roots, changed = _remove_in(self.roots, lambda c: c.id == comment_id)
        return CommentForest(roots=roots) if changed else self

    def remove_root(self, comment_id: CommentId) -> "CommentForest":
        """Remove a comment only if it sits at the root level."""
        roots = tuple(c for c in self.roots if c.id != comment_id)
        if len(roots) == len(self.roots):
            return self
        return CommentForest(roots=roots)

    def remove_pending(
        self, placeholder_id: CommentId, parent_id: Optional[CommentId]
    ) -> "CommentForest":
        """Drop one optimistic placeholder, matched by id and parent."""
        roots, changed = _remove_in(
            self.roots,
            lambda c: c.pending and c.id == placeholder_id and c.parent_id == parent_id,
        )
        return CommentForest(roots=roots) if changed else self

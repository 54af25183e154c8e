"""Comment depth policy.

Rules deciding how many reply levels are rendered and when replying is
disallowed:

- Level 0: top-level comment
- Level 1: reply to a top-level comment
- Level 2: reply to a reply (deepest level that is rendered nested)
- Level 3+: flattened to the root level / redirected to the thread root

All functions are pure and work over the flat list of a scope's comments.
"""

from collections.abc import Iterable, Mapping
from typing import Optional

import logfire

from portal.domain.error import CommentCycleError
from portal.domain.model.comment import Comment
from portal.domain.model.common import DomainModel
from portal.domain.value import CommentId

MAX_DEPTH = 2  # Deepest level that is rendered nested (0-based)
MAX_VISUAL_DEPTH = 3  # Deepest level that still gets extra indentation
FLATTEN_THRESHOLD = 3  # Depth at which threads are flattened
INDENT_SIZE = 20  # Visual units per depth level
MAX_INDENT = 60


class DepthCheck(DomainModel):
    """Outcome of validating where a new reply would land."""

    is_valid: bool
    message: Optional[str] = None
    suggested_parent_id: Optional[CommentId] = None


def index_comments(comments: Iterable[Comment]) -> dict[CommentId, Comment]:
    """Map comment ids to comments for repeated parent lookups."""
    return {comment.id: comment for comment in comments}


def depth_in(comment: Comment, index: Mapping[CommentId, Comment]) -> int:
    """Depth of a comment given an id index of its scope.

    Raises:
        CommentCycleError: If the parent chain revisits a comment
    """
    depth = 0
    visited = [comment.id]
    current = comment
    while current.parent_id is not None:
        depth += 1
        if current.parent_id in visited:
            logfire.warn(
                "Comment parent chain contains a cycle",
                comment_id=comment.id,
                chain=visited,
            )
            raise CommentCycleError(current.parent_id, visited + [current.parent_id])
        parent = index.get(current.parent_id)
        if parent is None:
            break
        visited.append(parent.id)
        current = parent
    return depth


def calculate_depth(comment: Comment, all_comments: Iterable[Comment]) -> int:
    """Calculate the depth of a comment in its thread.

    Walks up the parent chain, counting one per hop, until a root is reached
    or the parent is not in the list.

    Args:
        comment: Comment to measure
        all_comments: Flat list of every comment in the scope

    Returns:
        0 for top-level comments, parent depth + 1 otherwise

    Raises:
        CommentCycleError: If the parent chain loops
    """
    return depth_in(comment, index_comments(all_comments))


def can_reply(depth: int) -> bool:
    """Whether a comment at this depth may receive replies."""
    return depth < MAX_DEPTH


def should_show_reply_button(depth: int) -> bool:
    return can_reply(depth)


def should_flatten(depth: int) -> bool:
    """Whether a comment at this depth is rendered flattened."""
    return depth >= FLATTEN_THRESHOLD


def calculate_indentation(depth: int) -> int:
    """Visual indentation for a depth, saturating at MAX_INDENT."""
    visual_depth = min(max(depth, 0), MAX_VISUAL_DEPTH)
    return min(visual_depth * INDENT_SIZE, MAX_INDENT)


def root_ancestor(comment: Comment, index: Mapping[CommentId, Comment]) -> Comment:
    """Topmost ancestor reachable through the id index."""
    depth_in(comment, index)  # Fails loudly on cycles before walking
    current = comment
    while current.parent_id is not None:
        parent = index.get(current.parent_id)
        if parent is None:
            break
        current = parent
    return current


def redirect_parent(comment: Comment, all_comments: Iterable[Comment]) -> CommentId:
    """Parent id a reply to this comment should actually use.

    Replies to comments below the depth ceiling attach normally; replies to
    comments at the ceiling are redirected to the thread's root comment.
    """
    index = index_comments(all_comments)
    if depth_in(comment, index) < MAX_DEPTH:
        return comment.id
    return root_ancestor(comment, index).id


def validate_reply_depth(
    parent_id: Optional[CommentId], all_comments: Iterable[Comment]
) -> DepthCheck:
    """Check whether a reply to parent_id would respect the depth ceiling."""
    if parent_id is None:
        return DepthCheck(is_valid=True)

    index = index_comments(all_comments)
    parent = index.get(parent_id)
    if parent is None:
        return DepthCheck(is_valid=False, message="Parent comment not found")

    if depth_in(parent, index) + 1 > MAX_DEPTH:
        return DepthCheck(
            is_valid=False,
            message=(
                f"Comment depth limit ({MAX_DEPTH + 1} levels) exceeded. "
                "Reply will be added to thread root."
            ),
            suggested_parent_id=root_ancestor(parent, index).id,
        )

    return DepthCheck(is_valid=True)


def depth_limit_message(depth: int) -> str:
    if depth >= MAX_DEPTH:
        return (
            "Reply depth limit reached. "
            "Your reply will be added as a new comment in this thread."
        )
    return ""


def thread_continuation_message(reply_count: int) -> str:
    if reply_count > 0:
        noun = "reply" if reply_count == 1 else "replies"
        return f"Continue this thread ({reply_count} more {noun})"
    return "Continue this thread"

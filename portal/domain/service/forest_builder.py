"""Comment forest builder.

Turns the flat, server-sorted comment list of one scope into the rendered
reply forest. Comments that would sit deeper than MAX_DEPTH, or whose parent
is not in the list, are flattened to the root level instead of rejected.
"""

from collections.abc import Iterable

import logfire

from portal.domain.error import CommentCycleError
from portal.domain.model.comment import Comment
from portal.domain.model.forest import CommentForest
from portal.domain.service.depth_policy import MAX_DEPTH, depth_in, index_comments
from portal.domain.value import CommentId


def build_forest(comments: Iterable[Comment]) -> CommentForest:
    """Build the depth-bounded reply forest of one scope.

    Attachment only depends on each comment's parent_id and the parent's
    depth in the full list, so any ordering of the same records yields the
    same tree structure. Sibling order follows input order.

    Args:
        comments: Flat comment records, typically sorted by created_at

    Returns:
        Forest of root comments with populated replies
    """
    records = [comment.without_replies() for comment in comments]
    index = index_comments(records)

    root_ids: list[CommentId] = []
    children: dict[CommentId, list[CommentId]] = {cid: [] for cid in index}
    flattened = 0

    for comment in index.values():
        if comment.parent_id is None:
            root_ids.append(comment.id)
            continue

        parent = index.get(comment.parent_id)
        if parent is None:
            root_ids.append(comment.id)
            continue

        try:
            parent_depth = depth_in(parent, index)
        except CommentCycleError as e:
            logfire.warn(
                "Comment in parent cycle placed at root level",
                comment_id=comment.id,
                error=str(e),
            )
            root_ids.append(comment.id)
            continue

        if parent_depth + 1 <= MAX_DEPTH:
            children[parent.id].append(comment.id)
        else:
            flattened += 1
            root_ids.append(comment.id)

    def materialize(comment_id: CommentId) -> Comment:
        comment = index[comment_id]
        replies = tuple(materialize(child) for child in children[comment_id])
        if not replies:
            return comment
        return comment.model_copy(update={"replies": replies})

    forest = CommentForest(roots=tuple(materialize(cid) for cid in root_ids))
    logfire.debug(
        "Comment forest built",
        comments=len(index),
        roots=len(root_ids),
        flattened=flattened,
    )
    return forest

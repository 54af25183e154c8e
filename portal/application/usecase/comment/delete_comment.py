"""Delete comment use case."""

import logfire
from pydantic import BaseModel

from portal.adapter.error import AdapterError
from portal.application.usecase.base import ThreadRequest, ThreadUseCase
from portal.domain.value import CommentId


class DeleteCommentRequest(ThreadRequest):
    """Delete comment request."""

    comment_id: CommentId


class DeleteCommentResponse(BaseModel):
    """Delete comment response."""

    comment_id: CommentId
    removed_locally: bool


class DeleteCommentUseCase(ThreadUseCase):
    """Use case for deleting a comment.

    Only top-level comments are removed from the held forest; a deleted
    reply disappears with the next load or its comment-deleted event.
    """

    async def execute(self, request: DeleteCommentRequest) -> DeleteCommentResponse:
        """Execute delete comment flow.

        Raises:
            CommentOperationError: If the delete is rejected
        """
        store = self.store
        with logfire.span("delete_comment", comment_id=request.comment_id):
            api = self.api_for(request)

            store.clear_error()
            try:
                await api.delete(request.comment_id)
            except AdapterError as e:
                raise self.failed("delete", e) from e

            before = store.forest
            store.update(lambda forest: forest.remove_root(request.comment_id))
            removed = store.forest is not before
            logfire.info(
                "Comment deleted",
                comment_id=request.comment_id,
                removed_locally=removed,
            )
            return DeleteCommentResponse(
                comment_id=request.comment_id, removed_locally=removed
            )

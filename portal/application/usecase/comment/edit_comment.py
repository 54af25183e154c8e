"""Edit comment use case."""

import logfire
from pydantic import BaseModel

from portal.adapter.error import AdapterError
from portal.application.usecase.base import ThreadRequest, ThreadUseCase
from portal.application.usecase.comment.validation import clean_text
from portal.domain.model import Comment
from portal.domain.value import CommentId


class EditCommentRequest(ThreadRequest):
    """Edit comment request."""

    comment_id: CommentId
    text: str  # New text content (required, cannot be empty)


class EditCommentResponse(BaseModel):
    """Edit comment response."""

    comment: Comment


class EditCommentUseCase(ThreadUseCase):
    """Use case for updating a comment's text.

    No optimistic phase: the held comment changes only after the API
    accepted the edit.
    """

    async def execute(self, request: EditCommentRequest) -> EditCommentResponse:
        """Execute edit comment flow.

        Raises:
            ValidationError: If the new text is empty or too long
            CommentOperationError: If the edit is rejected
        """
        text = clean_text(request.text)
        store = self.store
        with logfire.span("edit_comment", comment_id=request.comment_id):
            api = self.api_for(request)

            store.clear_error()
            try:
                updated = await api.edit(request.comment_id, text)
            except AdapterError as e:
                raise self.failed("edit", e) from e

            store.update(
                lambda forest: forest.patch(
                    request.comment_id,
                    text=updated.text,
                    updated_at=updated.updated_at,
                )
            )
            logfire.info("Comment updated", comment_id=request.comment_id)
            return EditCommentResponse(comment=updated)

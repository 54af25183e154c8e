"""Flag comment use case."""

import logfire
from pydantic import BaseModel

from portal.adapter.error import AdapterError
from portal.application.usecase.base import ThreadRequest, ThreadUseCase
from portal.domain.error import ValidationError
from portal.domain.value import CommentId


class FlagCommentRequest(ThreadRequest):
    """Flag comment request."""

    comment_id: CommentId
    reason: str


class FlagCommentResponse(BaseModel):
    """Flag comment response."""

    comment_id: CommentId
    reason: str


class FlagCommentUseCase(ThreadUseCase):
    """Use case for reporting a comment."""

    async def execute(self, request: FlagCommentRequest) -> FlagCommentResponse:
        """Execute flag comment flow.

        Raises:
            ValidationError: If no reason is given
            CommentOperationError: If the flag is rejected
        """
        reason = request.reason.strip()
        if not reason:
            raise ValidationError("A reason is required to flag a comment")

        store = self.store
        with logfire.span("flag_comment", comment_id=request.comment_id):
            api = self.api_for(request)

            store.clear_error()
            try:
                await api.flag(request.comment_id, reason)
            except AdapterError as e:
                raise self.failed("flag", e) from e

            store.update(
                lambda forest: forest.patch(
                    request.comment_id, is_flagged=True, flag_reason=reason
                )
            )
            logfire.info("Comment flagged", comment_id=request.comment_id)
            return FlagCommentResponse(comment_id=request.comment_id, reason=reason)

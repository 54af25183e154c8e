"""Toggle reaction use case."""

from typing import Optional

import logfire
from pydantic import BaseModel

from portal.adapter.error import AdapterError
from portal.application.command import OptimisticReaction, run_optimistic
from portal.application.store import CommentStore
from portal.application.usecase.base import ThreadRequest, ThreadUseCase
from portal.domain.model import Comment
from portal.domain.service import ServiceSelector
from portal.domain.value import CommentId, ReactionId, ToggleAction, ViewerReaction


class ToggleReactionRequest(ThreadRequest):
    """Toggle reaction request."""

    comment_id: CommentId
    action: ToggleAction
    reaction_id: Optional[ReactionId] = None  # Defaults to the like reaction


class ToggleReactionResponse(BaseModel):
    """Toggle reaction response."""

    comment_id: CommentId
    action: ToggleAction
    comment: Optional[Comment]  # Held state after the call, if held locally


class ToggleReactionUseCase(ThreadUseCase):
    """Use case for liking or unliking a comment optimistically.

    The local count moves before the call. A success keeps the optimistic
    state as final; a failure restores the comment exactly as it was.
    """

    def __init__(
        self,
        store: CommentStore,
        selector: ServiceSelector,
        default_reaction_id: ReactionId = ReactionId(1),
    ) -> None:
        super().__init__(store, selector)
        self.default_reaction_id = default_reaction_id

    async def execute(self, request: ToggleReactionRequest) -> ToggleReactionResponse:
        """Execute toggle reaction flow.

        Raises:
            CommentOperationError: If the reaction call is rejected
        """
        store = self.store
        action = request.action
        with logfire.span(
            "toggle_reaction", comment_id=request.comment_id, action=action.value
        ):
            api = self.api_for(request)
            reaction_id = request.reaction_id or self.default_reaction_id
            mutation = OptimisticReaction(
                request.comment_id,
                action,
                ViewerReaction(reaction_id=reaction_id),
            )

            if not store.forest.contains(request.comment_id):
                logfire.warn(
                    "Reacting to a comment that is not held locally",
                    comment_id=request.comment_id,
                )

            async def call() -> None:
                if action == ToggleAction.LIKE:
                    await api.react(request.comment_id, reaction_id)
                else:
                    await api.unreact(request.comment_id)

            store.clear_error()
            try:
                await run_optimistic(store, mutation, call)
            except AdapterError as e:
                raise self.failed(action.value, e) from e

            held = store.forest.find(request.comment_id)
            logfire.info(
                "Reaction toggled",
                comment_id=request.comment_id,
                action=action.value,
                reaction_count=held.reaction_count if held else None,
            )
            return ToggleReactionResponse(
                comment_id=request.comment_id, action=action, comment=held
            )

"""Push events describing remote changes to comments.

Payload field names follow the realtime channel (camelCase); the models
accept either spelling.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from portal.domain.value import (
    CommentId,
    CommentScope,
    ReactionAction,
    ReactionId,
    ScopeKind,
)


class PushEventName(str, Enum):
    """Comment events published on the push channel."""

    COMMENT_ADDED = "comment-added"
    COMMENT_UPDATED = "comment-updated"
    COMMENT_DELETED = "comment-deleted"
    COMMENT_REACTION_UPDATED = "comment-reaction-updated"


class PushEvent(BaseModel):
    """Base class for push event payloads."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )


class CommentAddedEvent(PushEvent):
    """A comment was added somewhere in an announcement or calendar thread."""

    announcement_id: Optional[int] = Field(default=None, alias="announcementId")
    calendar_id: Optional[int] = Field(default=None, alias="calendarId")

    def in_scope(self, scope: CommentScope) -> bool:
        if scope.kind == ScopeKind.ANNOUNCEMENT:
            return self.announcement_id == scope.id
        return self.calendar_id == scope.id


class CommentUpdatedEvent(PushEvent):
    """Some fields of a comment changed; updates holds wire field names."""

    comment_id: CommentId = Field(alias="commentId")
    updates: dict[str, Any] = Field(default_factory=dict)


class CommentDeletedEvent(PushEvent):
    """A comment was removed."""

    comment_id: CommentId = Field(alias="commentId")


class CommentReactionUpdatedEvent(PushEvent):
    """Someone added or removed a reaction on a comment."""

    comment_id: CommentId = Field(alias="commentId")
    action: ReactionAction
    reaction_id: Optional[ReactionId] = Field(default=None, alias="reactionId")
    is_current_user: bool = Field(default=False, alias="isCurrentUser")

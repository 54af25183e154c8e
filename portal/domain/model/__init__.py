"""Domain models."""

from .comment import Comment
from .event import (
    CommentAddedEvent,
    CommentDeletedEvent,
    CommentReactionUpdatedEvent,
    CommentUpdatedEvent,
    PushEventName,
)
from .forest import CommentForest
from .page import CommentPage, NewComment

__all__ = [
    "Comment",
    "CommentAddedEvent",
    "CommentDeletedEvent",
    "CommentForest",
    "CommentPage",
    "CommentReactionUpdatedEvent",
    "CommentUpdatedEvent",
    "NewComment",
    "PushEventName",
]

"""Comment entity.

Comments hang off exactly one announcement or one calendar event and may
reply to another comment in the same scope. The server stores threads of any
depth; only the client-side forest is depth-bounded (see depth_policy).
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator

from portal.domain.model.common import DomainModel
from portal.domain.value import (
    AnnouncementId,
    Author,
    CalendarEventId,
    CommentId,
    ViewerReaction,
)


class Comment(DomainModel):
    """Comment entity.

    Threading is managed through:
    - parent_id: Direct parent comment (None for top-level)
    - replies: Child comments, filled in only when a forest is built

    Engagement is tracked as an aggregate reaction_count plus the reaction
    the current viewer applied, if any.
    """

    id: CommentId
    announcement_id: Optional[AnnouncementId] = None
    calendar_event_id: Optional[CalendarEventId] = None
    parent_id: Optional[CommentId] = None
    author: Author
    text: str = Field(min_length=1, max_length=10000)
    created_at: datetime
    updated_at: datetime
    is_flagged: bool = False
    flag_reason: Optional[str] = None
    is_deleted: bool = False
    reaction_count: int = Field(default=0, ge=0)
    viewer_reaction: Optional[ViewerReaction] = None
    pending: bool = False  # Optimistic placeholder awaiting the server
    replies: tuple["Comment", ...] = ()

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        """Reject whitespace-only text."""
        if not v.strip():
            raise ValueError("Comment text cannot be empty")
        return v

    @model_validator(mode="after")
    def validate_single_scope(self) -> "Comment":
        """A comment belongs to an announcement or a calendar event, never both."""
        if (self.announcement_id is None) == (self.calendar_event_id is None):
            raise ValueError(
                "Comment must have exactly one of announcement_id or calendar_event_id"
            )
        return self

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def has_viewer_reaction(self) -> bool:
        return self.viewer_reaction is not None

    def without_replies(self) -> "Comment":
        """Return the flat record, as the server sends it."""
        if not self.replies:
            return self
        return self.model_copy(update={"replies": ()})

    def with_reaction_delta(self, delta: int) -> "Comment":
        """Shift reaction_count by delta, never below zero."""
        return self.model_copy(
            update={"reaction_count": max(self.reaction_count + delta, 0)}
        )

    def liked(self, reaction: ViewerReaction) -> "Comment":
        """Viewer reacts: counted once, reaction always set."""
        delta = 0 if self.has_viewer_reaction else 1
        return self.with_reaction_delta(delta).model_copy(
            update={"viewer_reaction": reaction}
        )

    def unliked(self) -> "Comment":
        """Viewer withdraws the reaction: uncounted only if it was set."""
        delta = -1 if self.has_viewer_reaction else 0
        return self.with_reaction_delta(delta).model_copy(
            update={"viewer_reaction": None}
        )

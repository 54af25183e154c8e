"""Domain value objects for the portal comment engine.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and small pieces of business logic.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import Field, field_validator

from portal.domain.value.common import ValueObject
from portal.domain.value.identifiers import ActorId, ReactionId

if TYPE_CHECKING:
    from portal.domain.model.comment import Comment


class ActorType(str, Enum):
    """Role of the account acting on a comment."""

    ADMIN = "admin"
    STUDENT = "student"


class ScopeKind(str, Enum):
    """Kind of content a comment thread hangs off."""

    ANNOUNCEMENT = "announcement"
    CALENDAR = "calendar"


class ReactionAction(str, Enum):
    """Direction of a pushed reaction change."""

    ADDED = "added"
    REMOVED = "removed"


class ToggleAction(str, Enum):
    """Local reaction toggle requested by the viewer."""

    LIKE = "like"
    UNLIKE = "unlike"


class SortOrder(str, Enum):
    """Sort direction understood by the comment API."""

    ASC = "ASC"
    DESC = "DESC"


class CommentScope(ValueObject):
    """The announcement or calendar event a comment forest belongs to."""

    kind: ScopeKind
    id: int = Field(gt=0)

    @classmethod
    def for_announcement(cls, announcement_id: int) -> "CommentScope":
        """Scope for an announcement thread."""
        return cls(kind=ScopeKind.ANNOUNCEMENT, id=announcement_id)

    @classmethod
    def for_calendar_event(cls, calendar_event_id: int) -> "CommentScope":
        """Scope for a calendar event thread."""
        return cls(kind=ScopeKind.CALENDAR, id=calendar_event_id)

    def matches(self, comment: "Comment") -> bool:
        """Check whether a comment lives in this scope."""
        if self.kind == ScopeKind.ANNOUNCEMENT:
            return comment.announcement_id == self.id
        return comment.calendar_event_id == self.id

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"


class Author(ValueObject):
    """Who wrote a comment, as far as the viewer is allowed to know."""

    actor_type: ActorType
    actor_id: ActorId
    display_name: str | None = None
    avatar_ref: str | None = None
    is_anonymous: bool = False


class ViewerReaction(ValueObject):
    """Reaction the current viewer has applied to a comment."""

    reaction_id: ReactionId
    name: str = "like"
    emoji: str = "❤️"


class Pagination(ValueObject):
    """Page metadata returned alongside a comment listing."""

    page: int = 1
    limit: int = 50
    total: int = 0
    total_pages: int = 0
    has_next: bool = False
    has_prev: bool = False


class FetchOptions(ValueObject):
    """Listing parameters for a scope fetch."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=50, ge=1, le=200)
    sort_by: str = "created_at"
    sort_order: SortOrder = SortOrder.ASC


class ServerTime(ValueObject):
    """Current time as reported by the trusted clock service."""

    unix: int
    timestamp: datetime
    timezone: str = "Asia/Manila"


class SessionContext(ValueObject):
    """Explicit description of who is using the portal right now.

    Replaces reading tokens from global storage and the page location. The
    principals are opaque identifiers of the signed-in admin and student
    accounts (None when that role has no session).
    """

    path: str = ""
    admin_principal: str | None = None
    student_principal: str | None = None

    @field_validator("admin_principal", "student_principal")
    @classmethod
    def blank_principal_is_none(cls, v: str | None) -> str | None:
        """Treat empty principals as a missing session."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def has_admin_session(self) -> bool:
        return self.admin_principal is not None

    @property
    def has_student_session(self) -> bool:
        return self.student_principal is not None

    @property
    def on_admin_page(self) -> bool:
        return "/admin" in self.path

    @property
    def on_student_page(self) -> bool:
        return "/student" in self.path

    @property
    def identity(self) -> str:
        """Stable identifier of the acting account, used to detect user switches."""
        if self.admin_principal is not None:
            return f"{ActorType.ADMIN.value}:{self.admin_principal}"
        if self.student_principal is not None:
            return f"{ActorType.STUDENT.value}:{self.student_principal}"
        return "anonymous"

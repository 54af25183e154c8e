"""Domain value objects for the portal comment engine."""

from portal.domain.value.identifiers import (
    ActorId,
    AnnouncementId,
    CalendarEventId,
    CommentId,
    ReactionId,
)
from portal.domain.value.types import (
    ActorType,
    Author,
    CommentScope,
    FetchOptions,
    Pagination,
    ReactionAction,
    ScopeKind,
    ServerTime,
    SessionContext,
    SortOrder,
    ToggleAction,
    ViewerReaction,
)

__all__ = [
    # Identifiers
    "CommentId",
    "AnnouncementId",
    "CalendarEventId",
    "ActorId",
    "ReactionId",
    # Types
    "ActorType",
    "ScopeKind",
    "ReactionAction",
    "ToggleAction",
    "SortOrder",
    "CommentScope",
    "Author",
    "ViewerReaction",
    "Pagination",
    "FetchOptions",
    "ServerTime",
    "SessionContext",
]

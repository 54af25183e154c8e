"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from portal.domain.model import Comment
from portal.domain.value import (
    ActorId,
    ActorType,
    AnnouncementId,
    Author,
    CalendarEventId,
    CommentId,
    SessionContext,
    ViewerReaction,
)

BASE_TIME = datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)


def make_comment(
    comment_id: int,
    parent_id: Optional[int] = None,
    announcement_id: Optional[int] = 1,
    calendar_event_id: Optional[int] = None,
    text: Optional[str] = None,
    reaction_count: int = 0,
    liked: bool = False,
    actor_type: ActorType = ActorType.STUDENT,
    actor_id: int = 100,
    minutes: Optional[int] = None,
    **fields,
) -> Comment:
    """Helper function to build a flat comment record for tests.

    Comments in an announcement scope by default; pass calendar_event_id to
    place one in a calendar scope instead. created_at is offset from
    BASE_TIME by `minutes` (defaults to the id, so ids sort like time).
    """
    created_at = BASE_TIME + timedelta(
        minutes=comment_id if minutes is None else minutes
    )
    if calendar_event_id is not None:
        announcement_id = None
    return Comment(
        id=CommentId(comment_id),
        announcement_id=AnnouncementId(announcement_id) if announcement_id else None,
        calendar_event_id=CalendarEventId(calendar_event_id)
        if calendar_event_id
        else None,
        parent_id=CommentId(parent_id) if parent_id is not None else None,
        author=Author(
            actor_type=actor_type,
            actor_id=ActorId(actor_id),
            display_name=f"User {actor_id}",
        ),
        text=text or f"Comment {comment_id}",
        created_at=created_at,
        updated_at=created_at,
        reaction_count=reaction_count,
        viewer_reaction=ViewerReaction(reaction_id=1) if liked else None,
        **fields,
    )


STUDENT_SESSION = SessionContext(path="/student/newsfeed", student_principal="100")
ADMIN_SESSION = SessionContext(path="/admin/announcements", admin_principal="1")

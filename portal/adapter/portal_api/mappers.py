"""Mappers between portal API wire records and domain models.

The portal API speaks snake_case JSON with its own field names
(comment_id, parent_comment_id, comment_text, ...). Domain models are
immutable pydantic models, so mapping is done by hand here.
"""

from typing import Any, Dict, Optional

from portal.domain.model import Comment, NewComment
from portal.domain.value import (
    ActorId,
    ActorType,
    AnnouncementId,
    Author,
    CalendarEventId,
    CommentId,
    Pagination,
    ReactionId,
    ScopeKind,
    ViewerReaction,
)

DEFAULT_REACTION_ID = ReactionId(1)

# Wire fields a pushed update may change, and the comment field they map to
_MUTABLE_FIELDS = {
    "comment_text": "text",
    "text": "text",
    "is_flagged": "is_flagged",
    "flagged_reason": "flag_reason",
    "flag_reason": "flag_reason",
    "is_deleted": "is_deleted",
    "updated_at": "updated_at",
    "reaction_count": "reaction_count",
}

_AUTHOR_FIELDS = {
    "author_name": "display_name",
    "author_picture": "avatar_ref",
    "is_anonymous": "is_anonymous",
}


def reaction_from_wire(row: Dict[str, Any]) -> Optional[ViewerReaction]:
    """Convert the viewer's reaction of a wire record.

    Newer payloads carry a user_reaction object; older ones only a
    user_has_reacted flag, which implies the default reaction.
    """
    reaction = row.get("user_reaction")
    if isinstance(reaction, dict) and reaction.get("reaction_id") is not None:
        return ViewerReaction(
            reaction_id=ReactionId(int(reaction["reaction_id"])),
            name=reaction.get("reaction_name") or "like",
            emoji=reaction.get("reaction_emoji") or "❤️",
        )
    if row.get("user_has_reacted"):
        return ViewerReaction(reaction_id=DEFAULT_REACTION_ID)
    return None


def row_to_comment(row: Dict[str, Any]) -> Comment:
    """Convert a wire comment record to a Comment domain model.

    Nested replies in the record, if any, are ignored: the forest is always
    rebuilt from flat records.

    Args:
        row: Comment record as returned by the API

    Returns:
        Comment domain model
    """
    announcement_id = row.get("announcement_id")
    calendar_id = row.get("calendar_id")
    parent_id = row.get("parent_comment_id")
    return Comment(
        id=CommentId(int(row["comment_id"])),
        announcement_id=AnnouncementId(int(announcement_id))
        if announcement_id
        else None,
        calendar_event_id=CalendarEventId(int(calendar_id)) if calendar_id else None,
        parent_id=CommentId(int(parent_id)) if parent_id else None,
        author=Author(
            actor_type=ActorType(row.get("user_type", ActorType.STUDENT.value)),
            actor_id=ActorId(int(row.get("user_id") or 0)),
            display_name=row.get("author_name"),
            avatar_ref=row.get("author_picture"),
            is_anonymous=bool(row.get("is_anonymous", False)),
        ),
        text=row["comment_text"],
        created_at=row["created_at"],
        updated_at=row.get("updated_at") or row["created_at"],
        is_flagged=bool(row.get("is_flagged", False)),
        flag_reason=row.get("flagged_reason"),
        is_deleted=bool(row.get("is_deleted", False)),
        reaction_count=max(int(row.get("reaction_count") or 0), 0),
        viewer_reaction=reaction_from_wire(row),
    )


def comment_to_row(comment: Comment) -> Dict[str, Any]:
    """Convert a Comment domain model to a wire record."""
    row: Dict[str, Any] = {
        "comment_id": comment.id,
        "announcement_id": comment.announcement_id,
        "calendar_id": comment.calendar_event_id,
        "parent_comment_id": comment.parent_id,
        "user_type": comment.author.actor_type.value,
        "user_id": comment.author.actor_id,
        "author_name": comment.author.display_name,
        "author_picture": comment.author.avatar_ref,
        "is_anonymous": comment.author.is_anonymous,
        "comment_text": comment.text,
        "created_at": comment.created_at.isoformat(),
        "updated_at": comment.updated_at.isoformat(),
        "is_flagged": comment.is_flagged,
        "flagged_reason": comment.flag_reason,
        "is_deleted": comment.is_deleted,
        "reaction_count": comment.reaction_count,
        "user_reaction": None,
    }
    if comment.viewer_reaction is not None:
        row["user_reaction"] = {
            "reaction_id": comment.viewer_reaction.reaction_id,
            "reaction_name": comment.viewer_reaction.name,
            "reaction_emoji": comment.viewer_reaction.emoji,
        }
    return row


def row_to_pagination(row: Optional[Dict[str, Any]]) -> Pagination:
    """Convert wire pagination metadata (camelCase keys) to Pagination."""
    if not row:
        return Pagination()
    return Pagination(
        page=int(row.get("page", 1)),
        limit=int(row.get("limit", 50)),
        total=int(row.get("total", 0)),
        total_pages=int(row.get("totalPages", row.get("total_pages", 0))),
        has_next=bool(row.get("hasNext", row.get("has_next", False))),
        has_prev=bool(row.get("hasPrev", row.get("has_prev", False))),
    )


def new_comment_to_row(data: NewComment) -> Dict[str, Any]:
    """Build the create-comment request body.

    Calendar comments are posted to a scope-specific endpoint, so their body
    does not repeat the calendar id.
    """
    row: Dict[str, Any] = {
        "parent_comment_id": data.parent_id,
        "comment_text": data.text,
        "is_anonymous": data.is_anonymous,
    }
    if data.scope.kind == ScopeKind.ANNOUNCEMENT:
        row["announcement_id"] = data.scope.id
    return row


def comment_changes_from_wire(
    updates: Dict[str, Any], current: Comment
) -> Dict[str, Any]:
    """Translate a pushed partial update into comment field values.

    Identity, scope and parent fields are never taken from a patch: a comment
    does not move after creation. Unknown keys are dropped.

    Args:
        updates: Partial wire record from a comment-updated event
        current: Comment the update applies to

    Returns:
        Field values to merge into the comment
    """
    changes: Dict[str, Any] = {}
    for key, value in updates.items():
        field = _MUTABLE_FIELDS.get(key)
        if field is not None:
            changes[field] = value

    author_changes = {
        _AUTHOR_FIELDS[key]: value
        for key, value in updates.items()
        if key in _AUTHOR_FIELDS
    }
    if author_changes:
        changes["author"] = current.author.model_copy(update=author_changes)

    if "user_reaction" in updates or "user_has_reacted" in updates:
        changes["viewer_reaction"] = reaction_from_wire(updates)

    return changes

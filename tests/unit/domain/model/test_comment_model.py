"""Unit tests for the Comment entity."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from portal.domain.model import Comment
from portal.domain.value import (
    ActorId,
    ActorType,
    AnnouncementId,
    Author,
    CalendarEventId,
    CommentId,
    ViewerReaction,
)
from tests.conftest import make_comment

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)
AUTHOR = Author(actor_type=ActorType.STUDENT, actor_id=ActorId(1))


class TestValidation:
    """Tests for Comment field validation."""

    def test_rejects_whitespace_only_text(self):
        with pytest.raises(ValidationError):
            make_comment(1, text="   ")

    def test_rejects_both_scopes(self):
        """A comment cannot belong to an announcement and a calendar event."""
        with pytest.raises(ValidationError):
            Comment(
                id=CommentId(1),
                announcement_id=AnnouncementId(1),
                calendar_event_id=CalendarEventId(1),
                author=AUTHOR,
                text="hi",
                created_at=NOW,
                updated_at=NOW,
            )

    def test_rejects_missing_scope(self):
        with pytest.raises(ValidationError):
            Comment(
                id=CommentId(1),
                author=AUTHOR,
                text="hi",
                created_at=NOW,
                updated_at=NOW,
            )

    def test_rejects_negative_reaction_count(self):
        with pytest.raises(ValidationError):
            make_comment(1, reaction_count=-1)


class TestReactions:
    """Tests for viewer reaction transitions."""

    def test_like_then_unlike_round_trips(self):
        """Liking then unliking returns to the starting count and no reaction."""
        comment = make_comment(1, reaction_count=4)

        result = comment.liked(ViewerReaction(reaction_id=1)).unliked()

        assert result.reaction_count == 4
        assert result.viewer_reaction is None

    def test_like_when_already_liked_does_not_double_count(self):
        comment = make_comment(1, reaction_count=4, liked=True)

        result = comment.liked(ViewerReaction(reaction_id=2))

        assert result.reaction_count == 4
        assert result.viewer_reaction.reaction_id == 2

    def test_unlike_when_not_liked_keeps_count(self):
        comment = make_comment(1, reaction_count=4)

        assert comment.unliked().reaction_count == 4

    def test_unlike_never_goes_negative(self):
        """A liked comment with a zero count stays at zero when unliked."""
        comment = make_comment(1, reaction_count=0, liked=True)

        result = comment.unliked()

        assert result.reaction_count == 0
        assert result.viewer_reaction is None

    def test_reaction_delta_floors_at_zero(self):
        assert make_comment(1).with_reaction_delta(-3).reaction_count == 0

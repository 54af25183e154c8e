"""Strongly typed identifiers for portal entities.

The portal backend assigns integer identifiers. NewType keeps a comment id
from being passed where an announcement or calendar event id is expected.
"""

from typing import NewType

CommentId = NewType("CommentId", int)
AnnouncementId = NewType("AnnouncementId", int)
CalendarEventId = NewType("CalendarEventId", int)
ActorId = NewType("ActorId", int)
ReactionId = NewType("ReactionId", int)

"""Gateway interfaces for the portal comment engine.

Gateway interfaces are defined in the domain layer (dependency inversion).
Implementations live in the adapter layer.
"""

from portal.domain.gateway.channel import EventHandler, PushChannel
from portal.domain.gateway.clock import TrustedClock, align_timestamp, describe_age
from portal.domain.gateway.comment_api import CommentApi

__all__ = [
    "CommentApi",
    "EventHandler",
    "PushChannel",
    "TrustedClock",
    "align_timestamp",
    "describe_age",
]

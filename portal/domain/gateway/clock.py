"""Trusted clock gateway interface.

Optimistic placeholders and displayed ages use server time so that a
tampered client clock cannot reorder comments or fake their age.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from portal.domain.value import ServerTime


def describe_age(now: datetime, then: datetime) -> str:
    """Human-readable age of a timestamp relative to now."""
    seconds = int((now - then).total_seconds())
    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        minutes = seconds // 60
        return f"{minutes} minute{'s' if minutes > 1 else ''} ago"
    if seconds < 86400:
        hours = seconds // 3600
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    if seconds < 604800:
        days = seconds // 86400
        return f"{days} day{'s' if days > 1 else ''} ago"
    return f"{then:%b} {then.day}, {then.year}"


class TrustedClock(ABC):
    """Server-backed source of the current time."""

    @abstractmethod
    async def get_current_time(self) -> ServerTime:
        """Current server time.

        Raises:
            AdapterError: If the clock service cannot be reached
        """
        pass

    async def get_relative_time(self, timestamp: datetime) -> str:
        """Describe a timestamp's age using server time ("5 minutes ago")."""
        now = await self.get_current_time()
        return describe_age(align_timestamp(now.timestamp, timestamp), timestamp)


def align_timestamp(now: datetime, then: datetime) -> datetime:
    """Express `now` in the same naive or aware terms as `then`.

    Naive and aware datetimes cannot be compared or subtracted. A naive value
    is read as being in the other value's timezone.
    """
    if (now.tzinfo is None) == (then.tzinfo is None):
        return now
    if then.tzinfo is None:
        return now.replace(tzinfo=None)
    return now.replace(tzinfo=then.tzinfo)

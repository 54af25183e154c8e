"""Trusted clock backed by the portal's server time endpoint."""

import time
from datetime import datetime, timedelta, timezone
from typing import Optional

import logfire

from portal.adapter.error import AdapterError, ServerError
from portal.adapter.portal_api.client import PortalApiClient
from portal.domain.gateway import TrustedClock
from portal.domain.value import ServerTime

TIME_PATH = "/api/time/current"


class HttpTrustedClock(TrustedClock):
    """Server time with a short-lived cache.

    Server time is cached for cache_ttl seconds to keep optimistic updates
    from paying a round trip each.
    """

    def __init__(self, client: PortalApiClient, cache_ttl: float = 30.0) -> None:
        """Initialize HTTP trusted clock.

        Args:
            client: Portal API client
            cache_ttl: Seconds a fetched server time stays valid
        """
        self.client = client
        self.cache_ttl = cache_ttl
        self._cached: Optional[ServerTime] = None
        self._cached_at = 0.0

    async def get_current_time(self) -> ServerTime:
        if self._cached is not None and self.cache_ttl > 0:
            if time.monotonic() - self._cached_at < self.cache_ttl:
                return self._cached

        data = await self.client.request("GET", TIME_PATH)
        try:
            server_time = ServerTime(
                unix=int(data["unix"]),
                timestamp=data["timestamp"],
                timezone=data.get("timezone", "Asia/Manila"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ServerError(f"Malformed server time response: {e}") from e

        self._cached = server_time
        self._cached_at = time.monotonic()
        return server_time

    async def get_relative_time(self, timestamp: datetime) -> str:
        """Describe a timestamp's age, falling back to a plain date offline."""
        try:
            return await super().get_relative_time(timestamp)
        except AdapterError as e:
            logfire.warn("Server time unavailable for relative time", error=str(e))
            return f"{timestamp:%b} {timestamp.day}, {timestamp.year}"

    def clear_cache(self) -> None:
        self._cached = None
        self._cached_at = 0.0


class MockTrustedClock(TrustedClock):
    """Deterministic clock for tests and offline runs.

    Each reading advances the clock by `step` seconds so successive
    placeholders get distinct ticks.
    """

    def __init__(
        self,
        start: Optional[datetime] = None,
        step: float = 1.0,
    ) -> None:
        self.now = start or datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)
        self.step = step

    async def get_current_time(self) -> ServerTime:
        current = self.now
        self.now = current + timedelta(seconds=self.step)
        return ServerTime(
            unix=int(current.timestamp()),
            timestamp=current,
            timezone="UTC",
        )

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)

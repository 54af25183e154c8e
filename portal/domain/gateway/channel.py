"""Push channel gateway interface."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

EventHandler = Callable[[dict[str, Any]], Awaitable[None]]


class PushChannel(ABC):
    """Realtime channel delivering named events with JSON-like payloads.

    Delivery is advisory: events may arrive late, twice, or out of order.
    """

    @abstractmethod
    def on(self, event: str, handler: EventHandler) -> None:
        """Register a handler for an event name."""
        pass

    @abstractmethod
    def off(self, event: str, handler: EventHandler | None = None) -> None:
        """Remove one handler, or every handler of the event when None."""
        pass

    @abstractmethod
    async def publish(self, event: str, payload: dict[str, Any]) -> None:
        """Deliver an event to its registered handlers."""
        pass

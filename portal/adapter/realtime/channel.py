"""In-process push channel.

Delivers comment events published by whatever transport the portal runs
(a socket bridge, a test) to the handlers registered by comment threads.
"""

from typing import Any

import logfire

from portal.domain.gateway import EventHandler, PushChannel


class LocalPushChannel(PushChannel):
    """Event dispatcher keeping handlers per event name.

    Handlers run in registration order. A failing handler is logged and does
    not prevent the remaining handlers from seeing the event.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}

    def on(self, event: str, handler: EventHandler) -> None:
        handlers = self._handlers.setdefault(event, [])
        if handler not in handlers:
            handlers.append(handler)

    def off(self, event: str, handler: EventHandler | None = None) -> None:
        if handler is None:
            self._handlers.pop(event, None)
            return
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)
        if not handlers:
            self._handlers.pop(event, None)

    def handler_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))

    async def publish(self, event: str, payload: dict[str, Any]) -> None:
        handlers = list(self._handlers.get(event, []))
        logfire.debug("Push event received", push_event=event, handlers=len(handlers))
        for handler in handlers:
            try:
                await handler(payload)
            except Exception as e:
                logfire.error(
                    "Push event handler failed",
                    push_event=event,
                    error=str(e),
                    error_type=type(e).__name__,
                )

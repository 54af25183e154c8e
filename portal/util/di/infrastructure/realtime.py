"""Realtime infrastructure providers."""

from dishka import Scope, provide

from portal.adapter.realtime import LocalPushChannel
from portal.domain.gateway import PushChannel
from portal.util.di.base import ProviderBase


class RealtimeProvider(ProviderBase):
    """Push channel provider - concrete, shared by tests and production.

    The transport bridge (socket client, webhook consumer) publishes into
    this channel; comment threads subscribe to it.
    """

    @provide(scope=Scope.APP)
    def get_push_channel(self) -> PushChannel:
        """Provide the in-process push channel."""
        return LocalPushChannel()

"""Application layer DI providers."""

from dishka import Scope, provide

from portal.application.thread import CommentThreadFactory
from portal.config import CommentSettings
from portal.domain.gateway import PushChannel, TrustedClock
from portal.domain.service import ServiceSelector
from portal.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application provider - concrete, no mocks needed."""

    @provide(scope=Scope.APP)
    def get_comment_thread_factory(
        self,
        selector: ServiceSelector,
        clock: TrustedClock,
        channel: PushChannel,
        comment_settings: CommentSettings,
    ) -> CommentThreadFactory:
        """Provide comment thread factory."""
        return CommentThreadFactory(
            selector=selector,
            clock=clock,
            channel=channel,
            fetch_options=comment_settings.fetch_options,
            default_reaction_id=comment_settings.reaction_id,
        )

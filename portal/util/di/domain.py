"""Domain layer DI providers."""

from dishka import Scope, provide

from portal.domain.gateway import CommentApi
from portal.domain.service import ServiceSelector
from portal.domain.value import ActorType
from portal.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed."""

    scope = Scope.APP

    @provide
    def get_service_selector(
        self, bindings: dict[ActorType, CommentApi]
    ) -> ServiceSelector:
        """Provide role-aware service selector.

        Args:
            bindings: Dictionary mapping roles to their comment API bindings

        Returns:
            ServiceSelector over every configured binding
        """
        return ServiceSelector(bindings=bindings)

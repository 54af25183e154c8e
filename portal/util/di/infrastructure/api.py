"""Portal API infrastructure providers."""

from dishka import Scope, provide

from portal.adapter.portal_api import HttpCommentApi, HttpTrustedClock, PortalApiClient
from portal.config import Settings
from portal.domain.gateway import CommentApi, TrustedClock
from portal.domain.value import ActorType
from portal.util.di.base import ProviderBase


class ApiProvider(ProviderBase):
    """Portal API component base."""

    __mock_component__ = "api"


class ProdApiProvider(ApiProvider):
    """Production portal API provider.

    Each role gets its own client carrying that role's bearer token.
    """

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_comment_api_bindings(
        self, settings: Settings
    ) -> dict[ActorType, CommentApi]:
        """Provide one HTTP comment API binding per role."""
        tokens = {
            ActorType.ADMIN: settings.auth.admin_token,
            ActorType.STUDENT: settings.auth.student_token,
        }
        return {
            role: HttpCommentApi(
                actor_type=role,
                client=PortalApiClient(
                    base_url=settings.api.base_url,
                    token=token,
                    timeout=settings.api.timeout_seconds,
                ),
            )
            for role, token in tokens.items()
        }

    @provide(scope=Scope.APP)
    def get_trusted_clock(self, settings: Settings) -> TrustedClock:
        """Provide server-backed trusted clock.

        The time endpoint needs no credentials.
        """
        client = PortalApiClient(
            base_url=settings.api.base_url,
            timeout=settings.api.timeout_seconds,
        )
        return HttpTrustedClock(
            client=client, cache_ttl=settings.clock.cache_ttl_seconds
        )

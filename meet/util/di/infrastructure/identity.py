"""Identity infrastructure providers."""

from dishka import Scope, provide

from meet.adapter.firebase import RealFirebaseIdentityClient
from meet.config import Settings
from meet.domain.service import IdentityClient
from meet.util.di.base import ProviderBase
from meet.util.error import ConfigurationError


class IdentityProvider(ProviderBase):
    """Identity component base."""

    __mock_component__ = "identity"


class ProdIdentityProvider(IdentityProvider):
    """Production identity provider using Firebase."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_identity_client(self, settings: Settings) -> IdentityClient:
        """Provide Firebase identity client.

        Uses the Auth emulator when AUTH__IDENTITY__EMULATOR_HOST is set.

        Raises:
            ConfigurationError: If no API key is configured
        """
        identity = settings.auth.identity
        if not identity.api_key:
            raise ConfigurationError("Firebase API key must be configured")

        return RealFirebaseIdentityClient(
            api_key=identity.api_key,
            base_url=identity.base_url,
            timeout=identity.request_timeout,
        )

"""Directory infrastructure providers."""

from dishka import Scope, provide

from iam.adapter.auth0 import RealAuth0Directory
from iam.config import DirectorySettings, Settings
from iam.domain.service import Directory
from iam.util.di.base import ProviderBase
from iam.util.error import ConfigurationError

PLACEHOLDER_TOKEN = "CHANGE_ME_IN_PRODUCTION"


class DirectoryProvider(ProviderBase):
    """Directory component base."""

    __mock_component__ = "directory"


class ProdDirectoryProvider(DirectoryProvider):
    """Production directory provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_directory(
        self, settings: Settings, directory_settings: DirectorySettings
    ) -> Directory:
        """Provide Auth0 management API client.

        Returns:
            Auth0 directory client

        Raises:
            ConfigurationError: If no usable management API token is configured
        """
        token = directory_settings.access_token
        if not token:
            raise ConfigurationError("Directory access token must be configured")
        if token == PLACEHOLDER_TOKEN and settings.environment == "production":
            raise ConfigurationError(
                "Directory access token must be overridden in production"
            )

        return RealAuth0Directory(
            base_url=directory_settings.base_url,
            access_token=token,
            timeout=directory_settings.timeout,
        )

"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from iam.config import DirectorySettings, RuleSettings, Settings
from iam.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_directory_settings(self, settings: Settings) -> DirectorySettings:
        """Provide directory settings."""
        return settings.directory

    @provide(scope=Scope.APP)
    def provide_rule_settings(self, settings: Settings) -> RuleSettings:
        """Provide login rule settings."""
        return settings.rules

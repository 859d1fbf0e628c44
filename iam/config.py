"""Application configuration."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DirectorySettings(BaseModel):
    """Identity directory (Auth0 management API) configuration."""

    # Management API base URL, including the API version segment
    base_url: str = "https://example.auth0.com/api/v2"

    # Management API bearer token
    # Can be set via DIRECTORY__ACCESS_TOKEN env var
    access_token: str = "CHANGE_ME_IN_PRODUCTION"

    # Per-request timeout in seconds
    timeout: float = 30.0


class RuleSettings(BaseModel):
    """Login rule configuration."""

    # Client whose SAML assertions get the test.mozilla.com email rewrite
    # When None, the SAML mapping rule always passes through
    saml_test_client_id: str | None = "q0tFB9QyFIKqPOOKvkFnHMj2VwrLjX46"


class ObservabilitySettings(BaseModel):
    """Observability configuration for Logfire."""

    # Logfire API token (optional - if not set, logs only go to console)
    # Can be set via OBSERVABILITY__LOGFIRE_TOKEN env var
    logfire_token: str | None = None

    # Whether to send telemetry to Logfire cloud
    # If None, will auto-determine: sends if token is present, otherwise console-only
    send_to_logfire: bool | None = None


class Settings(BaseSettings):
    """Application settings.

    Set environment variables to override, nested values use a double
    underscore:

        ENVIRONMENT=production
        DIRECTORY__BASE_URL=https://tenant.auth0.com/api/v2
        DIRECTORY__ACCESS_TOKEN=...
        RULES__SAML_TEST_CLIENT_ID=q0tFB9QyFIKqPOOKvkFnHMj2VwrLjX46
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # Allows DIRECTORY__BASE_URL syntax
    )

    environment: Literal["test", "development", "staging", "production"] = "development"
    debug: bool = False

    # Git commit SHA (loaded from version.txt file or defaults to "unknown")
    git_sha: str = "unknown"

    host: str = "0.0.0.0"
    port: int = 8000

    # Nested settings
    directory: DirectorySettings = DirectorySettings()
    rules: RuleSettings = RuleSettings()
    observability: ObservabilitySettings = ObservabilitySettings()

    @model_validator(mode="after")
    def load_version(self) -> "Settings":
        """Load the deployed git SHA unless one was configured explicitly."""
        if self.git_sha == "unknown":
            self.git_sha = self._load_git_sha()
        return self

    @staticmethod
    def _load_git_sha() -> str:
        """Load git SHA from version file.

        Returns:
            Git SHA if version file exists, otherwise "unknown"
        """
        version_file = Path("/app/version.txt")
        if version_file.exists():
            try:
                return version_file.read_text().strip()
            except OSError:
                return "unknown"
        # In development, version file may not exist
        return "unknown"

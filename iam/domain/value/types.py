"""Domain value objects for identity linking.

Value objects are immutable and defined by their values, not identity.
Directory payloads carry more keys than the ones modelled here, so value
objects built from them keep unknown keys instead of dropping them.
"""

from typing import Any

from pydantic import ConfigDict, Field, field_validator

from iam.domain.value.common import ValueObject

EMAIL_NAME_ID_FORMAT = "urn:oasis:names:tc:SAML:2.0:nameid-format:email"


class ProviderIdentity(ValueObject):
    """One underlying provider identity of a directory account.

    An account that has never been linked has exactly one of these. Each
    linked secondary adds another.
    """

    model_config = ConfigDict(extra="allow")

    provider: str  # Connection strategy, e.g. "google-oauth2", "github", "email"
    user_id: str  # Provider-side id, without the "<provider>|" prefix

    @field_validator("user_id", mode="before")
    @classmethod
    def coerce_user_id(cls, v: Any) -> Any:
        """Some providers (GitHub) report numeric ids."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class SamlConfiguration(ValueObject):
    """SAML assertion settings attached to the authentication context."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    # Claim URI -> user attribute name
    mappings: dict[str, str] = Field(default_factory=dict)
    name_identifier_format: str | None = Field(
        default=None, alias="nameIdentifierFormat"
    )

"""Identity record entity.

One account held by the identity directory, as returned by the directory
and as handed to login rules.
"""

from typing import Any, Optional

from pydantic import ConfigDict, Field, field_validator

from iam.domain.model.common import DomainModel
from iam.domain.value import DirectoryUserId, ProviderIdentity


class IdentityRecord(DomainModel):
    """Directory account.

    `identities` holds one entry per underlying provider identity. More than
    one entry means earlier secondaries have already been linked into this
    account, which makes it the primary for its email.

    Profile keys that are not modelled (name, picture, logins_count, ...)
    are kept as extra fields so a record survives a rule round trip.
    """

    model_config = ConfigDict(extra="allow")

    user_id: DirectoryUserId
    email: Optional[str] = None
    email_verified: bool = False
    identities: list[ProviderIdentity] = Field(default_factory=list)
    app_metadata: dict[str, Any] = Field(default_factory=dict)
    user_metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("app_metadata", "user_metadata", mode="before")
    @classmethod
    def default_empty_metadata(cls, v: Any) -> Any:
        """Absent and null metadata both become an empty mapping."""
        return {} if v is None else v

    @property
    def has_verified_email(self) -> bool:
        """Whether this account can take part in email based linking."""
        return bool(self.email) and self.email_verified

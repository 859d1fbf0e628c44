"""Authentication context entity.

The side channel a login pipeline carries next to the user. Rules return a
new context instead of mutating the one they received.
"""

from typing import Any, Optional

from pydantic import ConfigDict, Field

from iam.domain.model.common import DomainModel
from iam.domain.value import DirectoryUserId, SamlConfiguration


class AuthenticationContext(DomainModel):
    """Per-login context.

    Only the fields the rules read or write are modelled, everything else
    the pipeline sends is kept as extra fields. Wire names are the
    pipeline's camelCase names.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    client_id: Optional[str] = Field(default=None, alias="clientID")

    # Written by account linking so later steps use the canonical account
    primary_user: Optional[DirectoryUserId] = Field(default=None, alias="primaryUser")
    primary_user_metadata: Optional[dict[str, Any]] = Field(
        default=None, alias="primaryUserMetadata"
    )

    saml_configuration: Optional[SamlConfiguration] = Field(
        default=None, alias="samlConfiguration"
    )

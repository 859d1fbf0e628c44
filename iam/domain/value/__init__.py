"""Domain value objects."""

from iam.domain.value.identifiers import DirectoryUserId
from iam.domain.value.types import (
    EMAIL_NAME_ID_FORMAT,
    ProviderIdentity,
    SamlConfiguration,
)

__all__ = [
    # Identifiers
    "DirectoryUserId",
    # Types
    "EMAIL_NAME_ID_FORMAT",
    "ProviderIdentity",
    "SamlConfiguration",
]

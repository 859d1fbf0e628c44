"""Test configuration and fixtures."""

from typing import Any

from iam.domain.model import IdentityRecord
from iam.domain.value import ProviderIdentity

DEFAULT_EMAIL = "jdoe@mozilla.com"


def make_user(
    user_id: str,
    email: str | None = DEFAULT_EMAIL,
    email_verified: bool = True,
    identities: list[ProviderIdentity] | None = None,
    app_metadata: dict[str, Any] | None = None,
    user_metadata: dict[str, Any] | None = None,
) -> IdentityRecord:
    """Helper function to build directory accounts for tests.

    Without explicit identities the account gets the single identity encoded
    in its ID, the way the directory builds ids: "<provider>|<provider id>".

    Args:
        user_id: Directory user ID, e.g. "github|1234"
        email: Account email
        email_verified: Whether the email is verified
        identities: Provider identities, derived from user_id when omitted
        app_metadata: App metadata
        user_metadata: User metadata

    Returns:
        IdentityRecord for the account
    """
    if identities is None:
        provider, _, provider_user_id = user_id.rpartition("|")
        identities = [ProviderIdentity(provider=provider, user_id=provider_user_id)]

    return IdentityRecord(
        user_id=user_id,
        email=email,
        email_verified=email_verified,
        identities=identities,
        app_metadata=app_metadata,
        user_metadata=user_metadata,
    )

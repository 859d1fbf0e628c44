"""Identity directory interface."""

from typing import Any

from iam.domain.model.identity_record import IdentityRecord


class Directory:
    """Generic identity directory interface.

    The directory is the system of record for accounts. Every method is a
    single remote call and raises a `DirectoryError` subclass on failure.
    Implementations never retry.
    """

    async def find_users_by_email(self, email: str) -> list[IdentityRecord]:
        """Find every account registered with an email.

        The directory lists the account that already holds linked
        identities first, followed by all unlinked accounts.

        Args:
            email: Email address to search for

        Returns:
            Accounts in directory order, verified or not

        Raises:
            DirectoryLookupError: If the lookup fails
        """
        raise NotImplementedError

    async def update_app_metadata(self, user_id: str, metadata: dict[str, Any]) -> None:
        """Overwrite an account's app metadata.

        Args:
            user_id: Directory user ID
            metadata: New app metadata

        Raises:
            MetadataUpdateError: If the write fails
        """
        raise NotImplementedError

    async def update_user_metadata(
        self, user_id: str, metadata: dict[str, Any]
    ) -> None:
        """Overwrite an account's user metadata.

        Args:
            user_id: Directory user ID
            metadata: New user metadata

        Raises:
            MetadataUpdateError: If the write fails
        """
        raise NotImplementedError

    async def link_identity(
        self, primary_user_id: str, provider: str, user_id: str
    ) -> None:
        """Attach a provider identity under a primary account.

        Args:
            primary_user_id: Directory user ID of the primary account
            provider: Provider of the identity to attach
            user_id: Provider-side user ID of the identity to attach

        Raises:
            IdentityLinkError: If the directory rejects the link
        """
        raise NotImplementedError

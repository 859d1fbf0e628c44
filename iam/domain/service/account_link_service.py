"""Account linking domain service.

Known hazard: nothing here locks the directory. Two logins for the same
email that run at the same time (two browser tabs, two unlinked accounts)
can both see the same candidates and both issue a link. The directory's
link operation is the only place that can reject the duplicate.
"""

import logfire

from iam.domain.error import IdentityLinkError
from iam.domain.model.identity_record import IdentityRecord
from iam.domain.service.base import Service
from iam.domain.service.directory import Directory
from iam.domain.service.reconciliation import merge_user_metadata


class AccountLinkService(Service):
    """Domain service for looking up and linking accounts in the directory."""

    def __init__(self, directory: Directory) -> None:
        """Initialize account link service.

        Args:
            directory: Identity directory client
        """
        self.directory = directory

    async def find_verified_candidates(self, email: str) -> list[IdentityRecord]:
        """Get the verified accounts registered with an email.

        Args:
            email: Verified email of the account logging in

        Returns:
            Verified accounts, in directory order

        Raises:
            DirectoryLookupError: If the lookup fails
        """
        with logfire.span("account_link_service.find_verified_candidates", email=email):
            records = await self.directory.find_users_by_email(email)
            verified = [record for record in records if record.email_verified]
            logfire.info(
                "Link candidates retrieved",
                email=email,
                count=len(records),
                verified_count=len(verified),
            )
            return verified

    async def link(self, secondary: IdentityRecord, primary: IdentityRecord) -> None:
        """Link a secondary account into a primary account.

        Steps, each awaited before the next starts:
        1. Overwrite the primary's app metadata with the secondary's
        2. Write the merged user metadata (primary wins) to the primary
        3. Attach the secondary's first provider identity to the primary

        A failure stops the sequence. Metadata already written stays written.

        Args:
            secondary: Account being linked (the one logging in)
            primary: Account that survives

        Raises:
            MetadataUpdateError: If a metadata write fails
            IdentityLinkError: If the link call fails, the secondary has no
                provider identity to transfer, or both are the same account
        """
        with logfire.span(
            "account_link_service.link",
            secondary_user_id=secondary.user_id,
            primary_user_id=primary.user_id,
        ):
            if not secondary.identities:
                raise IdentityLinkError(
                    f"Account {secondary.user_id} has no provider identity to link"
                )
            if secondary.user_id == primary.user_id:
                logfire.error(
                    "Account linking failed - account would be linked into itself",
                    user_id=secondary.user_id,
                )
                raise IdentityLinkError(
                    f"Account {secondary.user_id} cannot be linked into itself"
                )

            logfire.info(
                "Linking secondary identity into primary identity",
                secondary_user_id=secondary.user_id,
                primary_user_id=primary.user_id,
            )

            await self.directory.update_app_metadata(
                primary.user_id, secondary.app_metadata
            )
            await self.directory.update_user_metadata(
                primary.user_id,
                merge_user_metadata(secondary.user_metadata, primary.user_metadata),
            )

            # Only the first identity moves, even if the secondary holds more
            identity = secondary.identities[0]
            await self.directory.link_identity(
                primary.user_id, identity.provider, identity.user_id
            )

            logfire.info(
                "Accounts linked",
                secondary_user_id=secondary.user_id,
                primary_user_id=primary.user_id,
                provider=identity.provider,
            )

"""In-memory Auth0 directory for testing."""

from typing import Any, Iterable

from iam.adapter.auth0.client import Auth0Directory
from iam.domain.error import DirectoryLookupError, IdentityLinkError, MetadataUpdateError
from iam.domain.model.identity_record import IdentityRecord
from iam.domain.value import ProviderIdentity


class InMemoryAuth0Directory(Auth0Directory):
    """In-memory implementation of the Auth0 directory for testing.

    Behaves like the management API where the rules depend on it: lookups
    list accounts that hold linked identities first, and linking removes the
    secondary account and appends its identity to the primary.

    Every call is recorded in `calls` as (operation, *arguments). Failures
    are injected by setting `lookup_error`, `app_metadata_error`,
    `user_metadata_error` or a `link_status_code` of 400 and above.
    """

    def __init__(self, users: Iterable[IdentityRecord] = ()) -> None:
        self._users: dict[str, IdentityRecord] = {}
        for user in users:
            self.add_user(user)

        self.calls: list[tuple[Any, ...]] = []
        self.lookup_error: DirectoryLookupError | None = None
        self.app_metadata_error: MetadataUpdateError | None = None
        self.user_metadata_error: MetadataUpdateError | None = None
        self.link_status_code: int = 201

    def add_user(self, user: IdentityRecord) -> IdentityRecord:
        """Store an account, replacing one with the same ID."""
        self._users[user.user_id] = user
        return user

    def get_user(self, user_id: str) -> IdentityRecord | None:
        """Get a stored account by ID."""
        return self._users.get(user_id)

    def operations(self) -> list[str]:
        """Names of the recorded calls, in call order."""
        return [call[0] for call in self.calls]

    async def find_users_by_email(self, email: str) -> list[IdentityRecord]:
        """Find accounts by email, linked accounts first."""
        self.calls.append(("find_users_by_email", email))
        if self.lookup_error:
            raise self.lookup_error

        matches = [
            user
            for user in self._users.values()
            if user.email and user.email.lower() == email.lower()
        ]
        # Stable sort keeps insertion order within each group
        matches.sort(key=lambda user: len(user.identities) <= 1)
        return matches

    async def update_app_metadata(self, user_id: str, metadata: dict[str, Any]) -> None:
        """Replace app metadata of a stored account."""
        self.calls.append(("update_app_metadata", user_id, dict(metadata)))
        if self.app_metadata_error:
            raise self.app_metadata_error
        self._replace(user_id, app_metadata=dict(metadata))

    async def update_user_metadata(
        self, user_id: str, metadata: dict[str, Any]
    ) -> None:
        """Replace user metadata of a stored account."""
        self.calls.append(("update_user_metadata", user_id, dict(metadata)))
        if self.user_metadata_error:
            raise self.user_metadata_error
        self._replace(user_id, user_metadata=dict(metadata))

    async def link_identity(
        self, primary_user_id: str, provider: str, user_id: str
    ) -> None:
        """Move an identity under a primary account."""
        self.calls.append(("link_identity", primary_user_id, provider, user_id))
        if self.link_status_code >= 400:
            raise IdentityLinkError(
                f"Error linking account: status {self.link_status_code}",
                status_code=self.link_status_code,
            )

        primary = self._users.get(primary_user_id)
        if primary is None:
            raise IdentityLinkError(
                f"Error linking account: {primary_user_id} not found", status_code=404
            )

        # The secondary account disappears once its identity moves
        for candidate in list(self._users.values()):
            if candidate.user_id == primary_user_id or not candidate.identities:
                continue
            first = candidate.identities[0]
            if first.provider == provider and first.user_id == user_id:
                del self._users[candidate.user_id]
                break

        linked = ProviderIdentity(provider=provider, user_id=user_id)
        self._users[primary_user_id] = primary.model_copy(
            update={"identities": [*primary.identities, linked]}
        )

    def _replace(self, user_id: str, **update: Any) -> None:
        user = self._users.get(user_id)
        if user is None:
            raise MetadataUpdateError(f"User {user_id} not found", status_code=404)
        self._users[user_id] = user.model_copy(update=update)

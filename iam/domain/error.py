"""Domain layer errors."""

from typing import Sequence


class DomainError(Exception):
    """Base domain error."""

    pass


class AmbiguousIdentityError(DomainError):
    """Raised when the verified accounts for an email cannot be reconciled.

    More than two verified accounts sharing one email means the directory
    was never consolidated for it. An operator has to resolve this by hand.
    """

    def __init__(self, user_id: str, email: str | None, candidate_ids: Sequence[str]):
        self.user_id = user_id
        self.email = email
        self.candidate_ids = list(candidate_ids)
        super().__init__(
            f"Error linking account {user_id} as there are over 2 identities "
            f"with the email address {email} {','.join(self.candidate_ids)}"
        )


class DirectoryError(DomainError):
    """Base error for failed identity directory operations."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class DirectoryLookupError(DirectoryError):
    """Raised when the users-by-email lookup fails."""

    pass


class MetadataUpdateError(DirectoryError):
    """Raised when an app or user metadata write fails.

    Writes that completed before the failing one stay committed.
    """

    pass


class IdentityLinkError(DirectoryError):
    """Raised when attaching a secondary identity to its primary fails.

    Both metadata writes of the same attempt are already committed.
    """

    pass

"""Auth0 management API client.

Implements the identity directory on top of the Auth0 management API v2:
users-by-email lookup, metadata PATCH and identity linking.
"""

from typing import Any
from urllib.parse import quote

import httpx
import logfire

from iam.domain.error import DirectoryLookupError, IdentityLinkError, MetadataUpdateError
from iam.domain.model.identity_record import IdentityRecord
from iam.domain.service.directory import Directory


class Auth0Directory(Directory):
    """Base class for Auth0 directory clients.

    Provides type distinction for dependency injection.
    """

    pass


class RealAuth0Directory(Auth0Directory):
    """Auth0 management API client.

    Every call opens its own httpx client and is awaited to completion
    before returning. No call is retried.
    """

    def __init__(self, base_url: str, access_token: str, timeout: float = 30.0) -> None:
        """Initialize Auth0 directory client.

        Args:
            base_url: Management API base URL (e.g. https://tenant.auth0.com/api/v2)
            access_token: Management API bearer token
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}

    def _user_url(self, user_id: str) -> str:
        # Directory ids contain "|", which must be escaped in the path
        return f"{self.base_url}/users/{quote(user_id, safe='')}"

    async def find_users_by_email(self, email: str) -> list[IdentityRecord]:
        """Look up every account registered with an email.

        Args:
            email: Email address to search for

        Returns:
            Accounts in directory order

        Raises:
            DirectoryLookupError: If the request fails, returns a non-200
                status or returns a body that is not a list of users
        """
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    f"{self.base_url}/users-by-email",
                    params={"email": email},
                    headers=self._headers(),
                    timeout=self.timeout,
                )

                if response.status_code != 200:
                    logfire.error(
                        "Auth0 users-by-email lookup failed",
                        status_code=response.status_code,
                        error=response.text,
                    )
                    raise DirectoryLookupError(
                        f"API Call failed: {response.text}",
                        status_code=response.status_code,
                    )

                return [IdentityRecord.model_validate(u) for u in response.json()]

        except httpx.HTTPError as e:
            logfire.error("Auth0 users-by-email HTTP error", error=str(e))
            raise DirectoryLookupError(f"HTTP error during users-by-email lookup: {e}")
        except ValueError as e:
            # Undecodable JSON or records that fail validation
            logfire.error("Auth0 users-by-email returned invalid users", error=str(e))
            raise DirectoryLookupError(f"Invalid users-by-email response: {e}")

    async def update_app_metadata(self, user_id: str, metadata: dict[str, Any]) -> None:
        """Overwrite an account's app metadata."""
        await self._patch_user(user_id, {"app_metadata": metadata})

    async def update_user_metadata(
        self, user_id: str, metadata: dict[str, Any]
    ) -> None:
        """Overwrite an account's user metadata."""
        await self._patch_user(user_id, {"user_metadata": metadata})

    async def _patch_user(self, user_id: str, body: dict[str, Any]) -> None:
        """PATCH a user.

        Args:
            user_id: Directory user ID
            body: Fields to write

        Raises:
            MetadataUpdateError: If the request fails or returns a non-2xx status
        """
        field = next(iter(body))
        try:
            async with httpx.AsyncClient() as client:
                response = await client.patch(
                    self._user_url(user_id),
                    json=body,
                    headers=self._headers(),
                    timeout=self.timeout,
                )

                if not response.is_success:
                    logfire.error(
                        "Auth0 metadata update failed",
                        user_id=user_id,
                        field=field,
                        status_code=response.status_code,
                        error=response.text,
                    )
                    raise MetadataUpdateError(
                        f"Updating {field} of {user_id} failed: {response.status_code}",
                        status_code=response.status_code,
                    )

        except httpx.HTTPError as e:
            logfire.error(
                "Auth0 metadata update HTTP error",
                user_id=user_id,
                field=field,
                error=str(e),
            )
            raise MetadataUpdateError(f"HTTP error updating {field} of {user_id}: {e}")

    async def link_identity(
        self, primary_user_id: str, provider: str, user_id: str
    ) -> None:
        """Attach a provider identity under a primary account.

        Raises:
            IdentityLinkError: If the request fails or returns a status >= 400
        """
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    f"{self._user_url(primary_user_id)}/identities",
                    json={"provider": provider, "user_id": str(user_id)},
                    headers=self._headers(),
                    timeout=self.timeout,
                )

                if response.status_code >= 400:
                    logfire.error(
                        "Error linking account",
                        primary_user_id=primary_user_id,
                        provider=provider,
                        status_code=response.status_code,
                        error=response.text,
                    )
                    raise IdentityLinkError(
                        f"Error linking account: {response.reason_phrase}",
                        status_code=response.status_code,
                    )

        except httpx.HTTPError as e:
            logfire.error(
                "Auth0 identity link HTTP error",
                primary_user_id=primary_user_id,
                provider=provider,
                error=str(e),
            )
            raise IdentityLinkError(f"HTTP error linking account: {e}")

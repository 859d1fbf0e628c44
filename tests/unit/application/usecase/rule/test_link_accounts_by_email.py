"""Unit tests for LinkAccountsByEmailUseCase."""

from dishka import AsyncContainer
import pytest

from iam.adapter.auth0 import InMemoryAuth0Directory
from iam.application.usecase.rule import LinkAccountsByEmailUseCase, RuleRequest
from iam.domain.error import (
    AmbiguousIdentityError,
    DirectoryLookupError,
    IdentityLinkError,
    MetadataUpdateError,
)
from iam.domain.model import AuthenticationContext
from iam.domain.value import ProviderIdentity
from tests.conftest import make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestLinkAccountsByEmailGate:
    """Tests for the verified email gate."""

    @pytest.mark.asyncio
    async def test_unverified_email_passes_through(self, unit_env: AsyncContainer):
        """Should return user and context unchanged without directory calls."""
        # Arrange
        directory = await unit_env.get(InMemoryAuth0Directory)
        use_case = await unit_env.get(LinkAccountsByEmailUseCase)
        user = make_user("google-oauth2|1029", email_verified=False)
        context = AuthenticationContext(client_id="client-1")

        # Act
        result = await use_case.execute(RuleRequest(user=user, context=context))

        # Assert
        assert result.user == user
        assert result.context == context
        assert directory.calls == []

    @pytest.mark.asyncio
    async def test_missing_email_passes_through(self, unit_env: AsyncContainer):
        """Should return user and context unchanged when there is no email."""
        directory = await unit_env.get(InMemoryAuth0Directory)
        use_case = await unit_env.get(LinkAccountsByEmailUseCase)
        user = make_user("google-oauth2|1029", email=None)

        result = await use_case.execute(RuleRequest(user=user))

        assert result.user == user
        assert result.context == AuthenticationContext()
        assert directory.calls == []

    @pytest.mark.asyncio
    async def test_empty_email_passes_through(self, unit_env: AsyncContainer):
        """Should return user and context unchanged when the email is empty."""
        directory = await unit_env.get(InMemoryAuth0Directory)
        use_case = await unit_env.get(LinkAccountsByEmailUseCase)
        directory.add_user(make_user("github|1234", email=""))
        user = make_user("google-oauth2|1029", email="")

        result = await use_case.execute(RuleRequest(user=user))

        assert result.user == user
        assert result.context == AuthenticationContext()
        assert directory.calls == []


class TestLinkAccountsByEmailNoAction:
    """Tests for logins that need no linking."""

    @pytest.mark.asyncio
    async def test_single_account_is_left_alone(self, unit_env: AsyncContainer):
        """Should neither write metadata nor link for the only account."""
        directory = await unit_env.get(InMemoryAuth0Directory)
        use_case = await unit_env.get(LinkAccountsByEmailUseCase)
        user = directory.add_user(make_user("google-oauth2|1029"))
        context = AuthenticationContext(client_id="client-1")

        result = await use_case.execute(RuleRequest(user=user, context=context))

        assert result.user == user
        assert result.context == context
        assert directory.operations() == ["find_users_by_email"]

    @pytest.mark.asyncio
    async def test_unverified_duplicate_is_ignored(self, unit_env: AsyncContainer):
        """Should not link into an account whose email is unverified."""
        directory = await unit_env.get(InMemoryAuth0Directory)
        use_case = await unit_env.get(LinkAccountsByEmailUseCase)
        directory.add_user(make_user("email|5f1a", email_verified=False))
        user = directory.add_user(make_user("google-oauth2|1029"))

        result = await use_case.execute(RuleRequest(user=user))

        assert result.context.primary_user is None
        assert directory.operations() == ["find_users_by_email"]

    @pytest.mark.asyncio
    async def test_relogin_through_linked_primary(self, unit_env: AsyncContainer):
        """Should not link again when logging in through the linked primary."""
        directory = await unit_env.get(InMemoryAuth0Directory)
        use_case = await unit_env.get(LinkAccountsByEmailUseCase)
        primary = directory.add_user(
            make_user(
                "ad|Mozilla-LDAP|jdoe",
                identities=[
                    ProviderIdentity(provider="ad", user_id="Mozilla-LDAP|jdoe"),
                    ProviderIdentity(provider="github", user_id="1234"),
                ],
            )
        )
        directory.add_user(make_user("email|5f1a"))

        result = await use_case.execute(RuleRequest(user=primary))

        assert result.context.primary_user is None
        assert "link_identity" not in directory.operations()


class TestLinkAccountsByEmailLink:
    """Tests for logins that link accounts."""

    @pytest.mark.asyncio
    async def test_links_secondary_into_primary(self, unit_env: AsyncContainer):
        """Should link the user into the first result and name it in the context."""
        # Arrange
        directory = await unit_env.get(InMemoryAuth0Directory)
        use_case = await unit_env.get(LinkAccountsByEmailUseCase)
        directory.add_user(
            make_user(
                "github|1234",
                app_metadata={"groups": ["old"]},
                user_metadata={"locale": "fr"},
            )
        )
        user = directory.add_user(
            make_user(
                "google-oauth2|1029",
                app_metadata={"groups": ["team_moco"]},
                user_metadata={"locale": "en", "theme": "dark"},
            )
        )
        context = AuthenticationContext(client_id="client-1")

        # Act
        result = await use_case.execute(RuleRequest(user=user, context=context))

        # Assert
        assert result.user == user
        assert result.context.client_id == "client-1"
        assert result.context.primary_user == "github|1234"
        # Snapshot from before the merge
        assert result.context.primary_user_metadata == {"locale": "fr"}

        primary = directory.get_user("github|1234")
        assert primary is not None
        assert primary.app_metadata == {"groups": ["team_moco"]}
        assert primary.user_metadata == {"locale": "fr", "theme": "dark"}
        assert ProviderIdentity(provider="google-oauth2", user_id="1029") in (
            primary.identities
        )
        assert directory.get_user("google-oauth2|1029") is None

    @pytest.mark.asyncio
    async def test_missing_metadata_defaults_to_empty(self, unit_env: AsyncContainer):
        """Should write empty app metadata when the user has none."""
        directory = await unit_env.get(InMemoryAuth0Directory)
        use_case = await unit_env.get(LinkAccountsByEmailUseCase)
        directory.add_user(make_user("github|1234", user_metadata={"locale": "fr"}))
        user = directory.add_user(make_user("google-oauth2|1029"))

        await use_case.execute(RuleRequest(user=user))

        assert directory.calls[1] == ("update_app_metadata", "github|1234", {})
        assert directory.calls[2] == (
            "update_user_metadata",
            "github|1234",
            {"locale": "fr"},
        )

    @pytest.mark.asyncio
    async def test_numeric_provider_id_is_sent_as_string(
        self, unit_env: AsyncContainer
    ):
        """Should send the provider user ID as a string."""
        directory = await unit_env.get(InMemoryAuth0Directory)
        use_case = await unit_env.get(LinkAccountsByEmailUseCase)
        directory.add_user(make_user("ad|Mozilla-LDAP|jdoe"))
        user = directory.add_user(
            make_user(
                "github|1234",
                identities=[
                    ProviderIdentity.model_validate(
                        {"provider": "github", "user_id": 1234}
                    )
                ],
            )
        )

        await use_case.execute(RuleRequest(user=user))

        assert directory.calls[-1] == (
            "link_identity",
            "ad|Mozilla-LDAP|jdoe",
            "github",
            "1234",
        )


class TestLinkAccountsByEmailFailures:
    """Tests for failed linking."""

    @pytest.mark.asyncio
    async def test_more_than_two_accounts_is_ambiguous(
        self, unit_env: AsyncContainer
    ):
        """Should fail with every candidate ID and without writes."""
        directory = await unit_env.get(InMemoryAuth0Directory)
        use_case = await unit_env.get(LinkAccountsByEmailUseCase)
        user = directory.add_user(make_user("a"))
        directory.add_user(make_user("b"))
        directory.add_user(make_user("c"))

        with pytest.raises(AmbiguousIdentityError) as exc_info:
            await use_case.execute(RuleRequest(user=user))

        assert exc_info.value.candidate_ids == ["a", "b", "c"]
        assert str(exc_info.value).endswith(" a,b,c")
        assert directory.operations() == ["find_users_by_email"]

    @pytest.mark.asyncio
    async def test_no_verified_accounts_is_ambiguous(self, unit_env: AsyncContainer):
        """Should fail when the directory does not know the user's email."""
        directory = await unit_env.get(InMemoryAuth0Directory)
        use_case = await unit_env.get(LinkAccountsByEmailUseCase)
        user = make_user("google-oauth2|1029")

        with pytest.raises(AmbiguousIdentityError) as exc_info:
            await use_case.execute(RuleRequest(user=user))

        assert exc_info.value.candidate_ids == []
        assert directory.operations() == ["find_users_by_email"]

    @pytest.mark.asyncio
    async def test_lookup_failure_propagates(self, unit_env: AsyncContainer):
        """Should fail without linking when the lookup fails."""
        directory = await unit_env.get(InMemoryAuth0Directory)
        use_case = await unit_env.get(LinkAccountsByEmailUseCase)
        directory.lookup_error = DirectoryLookupError("API Call failed: down", 503)
        user = make_user("google-oauth2|1029")

        with pytest.raises(DirectoryLookupError):
            await use_case.execute(RuleRequest(user=user))

        assert directory.operations() == ["find_users_by_email"]

    @pytest.mark.asyncio
    async def test_app_metadata_failure_propagates(self, unit_env: AsyncContainer):
        """Should fail before user metadata and link when app metadata fails."""
        directory = await unit_env.get(InMemoryAuth0Directory)
        use_case = await unit_env.get(LinkAccountsByEmailUseCase)
        directory.add_user(make_user("github|1234"))
        user = directory.add_user(make_user("google-oauth2|1029"))
        directory.app_metadata_error = MetadataUpdateError("rejected", 400)

        with pytest.raises(MetadataUpdateError):
            await use_case.execute(RuleRequest(user=user))

        assert directory.operations() == ["find_users_by_email", "update_app_metadata"]

    @pytest.mark.asyncio
    async def test_link_failure_keeps_metadata_writes(
        self, unit_env: AsyncContainer
    ):
        """Should report the link failure while the primary keeps new metadata."""
        # Arrange
        directory = await unit_env.get(InMemoryAuth0Directory)
        use_case = await unit_env.get(LinkAccountsByEmailUseCase)
        directory.add_user(make_user("github|1234", user_metadata={"locale": "fr"}))
        user = directory.add_user(
            make_user(
                "google-oauth2|1029",
                app_metadata={"groups": ["team_moco"]},
                user_metadata={"locale": "en", "theme": "dark"},
            )
        )
        directory.link_status_code = 400

        # Act
        with pytest.raises(IdentityLinkError) as exc_info:
            await use_case.execute(RuleRequest(user=user))

        # Assert
        assert exc_info.value.status_code == 400
        primary = directory.get_user("github|1234")
        assert primary is not None
        assert primary.app_metadata == {"groups": ["team_moco"]}
        assert primary.user_metadata == {"locale": "fr", "theme": "dark"}
        assert len(primary.identities) == 1
        assert directory.get_user("google-oauth2|1029") is not None

    @pytest.mark.asyncio
    async def test_user_listed_first_fails_without_writes(
        self, unit_env: AsyncContainer
    ):
        """Should fail the login when the user is the first of two unlinked accounts."""
        directory = await unit_env.get(InMemoryAuth0Directory)
        use_case = await unit_env.get(LinkAccountsByEmailUseCase)
        user = directory.add_user(make_user("google-oauth2|1029"))
        directory.add_user(make_user("github|1234"))

        with pytest.raises(IdentityLinkError):
            await use_case.execute(RuleRequest(user=user))

        assert directory.operations() == ["find_users_by_email"]
        assert directory.get_user("github|1234") is not None

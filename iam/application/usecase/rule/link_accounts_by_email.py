"""Link accounts by email use case."""

import logfire

from iam.application.usecase.rule.base import LoginRule, RuleRequest, RuleResult
from iam.domain.error import AmbiguousIdentityError
from iam.domain.model import Ambiguous, NoAction
from iam.domain.service import AccountLinkService, decide_link


class LinkAccountsByEmailUseCase(LoginRule):
    """Use case for linking the account logging in with accounts sharing its email.

    On a successful link the context names the primary account, so the rest
    of the login continues as that account. The user handed back is always
    the one that was handed in.
    """

    def __init__(self, account_link_service: AccountLinkService) -> None:
        """Initialize link accounts use case.

        Args:
            account_link_service: Account linking domain service
        """
        self.account_link_service = account_link_service

    async def execute(self, request: RuleRequest) -> RuleResult:
        """Execute account linking for one login.

        Steps:
        1. Pass through unless the email is present and verified
        2. Look up the verified accounts for the email
        3. Decide which account is the primary
        4. Merge metadata into the primary and link the user as secondary

        Args:
            request: User and context of the login

        Returns:
            The user and the (possibly updated) context

        Raises:
            DirectoryLookupError: If the lookup fails
            AmbiguousIdentityError: If the accounts cannot be reconciled
            MetadataUpdateError: If a metadata write fails
            IdentityLinkError: If the link call fails
        """
        user = request.user
        context = request.context

        # Merging on an unverified email would let anyone claim an account
        if not user.has_verified_email:
            logfire.info(
                "Account linking skipped - email missing or unverified",
                user_id=user.user_id,
            )
            return RuleResult(user=user, context=context)

        with logfire.span(
            "link_accounts_by_email", user_id=user.user_id, email=user.email
        ):
            candidates = await self.account_link_service.find_verified_candidates(
                user.email
            )
            decision = decide_link(user, candidates)

            if isinstance(decision, Ambiguous):
                error = AmbiguousIdentityError(
                    user.user_id, user.email, decision.candidate_ids
                )
                logfire.error(
                    "Account linking failed - ambiguous identities",
                    user_id=user.user_id,
                    email=user.email,
                    candidate_ids=decision.candidate_ids,
                )
                raise error

            if isinstance(decision, NoAction):
                logfire.info(
                    "No account linking required",
                    user_id=user.user_id,
                    reason=decision.reason,
                )
                return RuleResult(user=user, context=context)

            await self.account_link_service.link(decision.secondary, decision.primary)

            # Snapshot of the primary's metadata from before the merge
            linked_context = context.model_copy(
                update={
                    "primary_user": decision.primary.user_id,
                    "primary_user_metadata": dict(decision.primary.user_metadata),
                }
            )
            return RuleResult(user=user, context=linked_context)

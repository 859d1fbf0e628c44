"""Reconciliation of accounts that share a verified email.

Pure decision logic: given the account logging in and the verified
accounts the directory knows for its email, work out which account is the
primary and whether anything has to be linked.
"""

from typing import Any, Sequence

import logfire

from iam.domain.model import Ambiguous, IdentityRecord, Link, LinkDecision, NoAction


def decide_link(
    user: IdentityRecord, candidates: Sequence[IdentityRecord]
) -> LinkDecision:
    """Decide how to reconcile the authenticating account.

    The directory lists an already linked primary before all unlinked
    accounts, so with two candidates the first one is the primary whenever
    linking has happened before for this email. Three or more verified
    accounts are never resolved automatically, neither is an empty list
    (the authenticating account itself should always be present).

    Args:
        user: Account currently logging in
        candidates: Verified accounts for the user's email, in directory order

    Returns:
        NoAction, Link or Ambiguous
    """
    if len(candidates) == 1:
        return NoAction(reason="Only verified account for this email")

    if len(candidates) != 2:
        return Ambiguous(candidate_ids=[c.user_id for c in candidates])

    first, second = candidates

    if len(first.identities) >= 1:
        if len(user.identities) > 1 and user.user_id == first.user_id:
            return NoAction(reason="Logged in through the already linked primary")
        if len(user.identities) == 1:
            return Link(secondary=user, primary=first)

        # Already holds linked identities but is not listed first
        logfire.warn(
            "Account linking skipped - linked account is not the first search result",
            user_id=user.user_id,
            first_user_id=first.user_id,
            identity_count=len(user.identities),
        )
        return NoAction(reason="Linked account is not the first search result")

    # First search result has no identities at all
    if first.user_id == user.user_id:
        return Link(secondary=user, primary=second)
    return Link(secondary=user, primary=first)


def merge_user_metadata(
    secondary: dict[str, Any], primary: dict[str, Any]
) -> dict[str, Any]:
    """Shallow merge of user metadata where the primary wins on collisions.

    Args:
        secondary: User metadata of the account being linked
        primary: User metadata of the surviving account

    Returns:
        New mapping with the keys of both
    """
    return {**secondary, **primary}

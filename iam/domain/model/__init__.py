"""Domain model entities for identity linking."""

from iam.domain.model.context import AuthenticationContext
from iam.domain.model.identity_record import IdentityRecord
from iam.domain.model.link_decision import Ambiguous, Link, LinkDecision, NoAction

__all__ = [
    "AuthenticationContext",
    "IdentityRecord",
    "LinkDecision",
    "NoAction",
    "Link",
    "Ambiguous",
]

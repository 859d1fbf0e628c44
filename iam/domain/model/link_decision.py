"""Outcomes of the account linking decision."""

from typing import Union

from iam.domain.model.common import DomainModel
from iam.domain.model.identity_record import IdentityRecord
from iam.domain.value import DirectoryUserId


class NoAction(DomainModel):
    """Nothing to link for this login."""

    reason: str


class Link(DomainModel):
    """Attach `secondary` under `primary`."""

    secondary: IdentityRecord
    primary: IdentityRecord


class Ambiguous(DomainModel):
    """The verified accounts for an email cannot be reconciled automatically."""

    candidate_ids: list[DirectoryUserId]


LinkDecision = Union[NoAction, Link, Ambiguous]

"""Shared request and result types for login rules.

A login rule runs once per login attempt. It receives the user and the
authentication context and hands back both, possibly changed, or raises.
"""

from abc import abstractmethod

from pydantic import BaseModel, Field

from iam.application.usecase.base import BaseUseCase
from iam.domain.model import AuthenticationContext, IdentityRecord


class RuleRequest(BaseModel):
    """Input of a login rule."""

    user: IdentityRecord
    context: AuthenticationContext = Field(default_factory=AuthenticationContext)


class RuleResult(BaseModel):
    """Output of a login rule."""

    user: IdentityRecord
    context: AuthenticationContext


class LoginRule(BaseUseCase):
    """Base class for login rules."""

    @abstractmethod
    async def execute(self, request: RuleRequest) -> RuleResult:
        pass

"""Domain layer DI providers."""

from dishka import Scope, provide

from iam.domain.service import AccountLinkService, Directory
from iam.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped, each rule invocation gets fresh
    service instances.
    """

    scope = Scope.REQUEST

    @provide
    def get_account_link_service(self, directory: Directory) -> AccountLinkService:
        """Provide account linking domain service."""
        return AccountLinkService(directory=directory)

"""Application layer DI providers."""

from dishka import Scope, provide

from iam.application.usecase.rule import LinkAccountsByEmailUseCase, SamlMappingUseCase
from iam.config import RuleSettings
from iam.domain.service import AccountLinkService
from iam.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_link_accounts_by_email_use_case(
        self, account_link_service: AccountLinkService
    ) -> LinkAccountsByEmailUseCase:
        """Provide link accounts by email use case."""
        return LinkAccountsByEmailUseCase(account_link_service=account_link_service)

    @provide(scope=Scope.REQUEST)
    def get_saml_mapping_use_case(
        self, rule_settings: RuleSettings
    ) -> SamlMappingUseCase:
        """Provide SAML mapping use case."""
        return SamlMappingUseCase(rule_settings=rule_settings)

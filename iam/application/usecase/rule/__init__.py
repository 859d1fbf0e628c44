"""Login rule use cases."""

from .base import LoginRule, RuleRequest, RuleResult
from .link_accounts_by_email import LinkAccountsByEmailUseCase
from .saml_mapping import SamlMappingUseCase

__all__ = [
    "LinkAccountsByEmailUseCase",
    "LoginRule",
    "RuleRequest",
    "RuleResult",
    "SamlMappingUseCase",
]

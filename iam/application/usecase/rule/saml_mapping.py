"""SAML attribute mapping use case."""

import logfire

from iam.application.usecase.rule.base import LoginRule, RuleRequest, RuleResult
from iam.config import RuleSettings
from iam.domain.value import EMAIL_NAME_ID_FORMAT, SamlConfiguration

TEST_EMAIL_ATTRIBUTE = "myemail"

# Every email-bearing claim is answered from the rewritten attribute
TEST_EMAIL_MAPPINGS = {
    "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/nameidentifier": TEST_EMAIL_ATTRIBUTE,
    "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/emailaddress": TEST_EMAIL_ATTRIBUTE,
    "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/email": TEST_EMAIL_ATTRIBUTE,
}


class SamlMappingUseCase(LoginRule):
    """Use case for asserting test.mozilla.com emails to one SAML client.

    Lets a test service provider see mozilla.com users under their
    test.mozilla.com address. Logins for any other client pass through.
    """

    def __init__(self, rule_settings: RuleSettings) -> None:
        """Initialize SAML mapping use case.

        Args:
            rule_settings: Login rule settings
        """
        self.rule_settings = rule_settings

    async def execute(self, request: RuleRequest) -> RuleResult:
        user = request.user
        context = request.context

        client_id = self.rule_settings.saml_test_client_id
        if not client_id or context.client_id != client_id:
            return RuleResult(user=user, context=context)

        if not user.email:
            logfire.warn(
                "SAML mapping skipped - user has no email",
                user_id=user.user_id,
                client_id=client_id,
            )
            return RuleResult(user=user, context=context)

        test_email = user.email.replace("mozilla.com", "test.mozilla.com", 1)
        mapped_user = user.model_copy(update={TEST_EMAIL_ATTRIBUTE: test_email})

        saml_configuration = (context.saml_configuration or SamlConfiguration()).model_copy(
            update={
                "mappings": dict(TEST_EMAIL_MAPPINGS),
                "name_identifier_format": EMAIL_NAME_ID_FORMAT,
            }
        )
        mapped_context = context.model_copy(
            update={"saml_configuration": saml_configuration}
        )

        logfire.info(
            "SAML email mapping applied",
            user_id=user.user_id,
            client_id=client_id,
        )
        return RuleResult(user=mapped_user, context=mapped_context)

"""Login rule routes.

The identity provider's login hook posts the user and context of every
login here and continues the login with what comes back.
"""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, status

from iam.application.usecase.rule import (
    LinkAccountsByEmailUseCase,
    RuleRequest,
    RuleResult,
    SamlMappingUseCase,
)
from iam.domain.error import AmbiguousIdentityError, DirectoryError

router = APIRouter(prefix="/rules", tags=["rules"], route_class=DishkaRoute)


@router.post("/link-accounts-by-email", response_model=RuleResult)
async def link_accounts_by_email(
    request: RuleRequest,
    use_case: FromDishka[LinkAccountsByEmailUseCase],
) -> RuleResult:
    """Link the account logging in with the account sharing its verified email.

    Args:
        request: User and context of the login
        use_case: Link accounts use case from DI

    Returns:
        The user and the context, naming the primary account after a link

    Raises:
        HTTPException: 409 for ambiguous accounts, 502 for directory failures
    """
    try:
        return await use_case.execute(request)
    except AmbiguousIdentityError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except DirectoryError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.post("/saml-mapping", response_model=RuleResult)
async def saml_mapping(
    request: RuleRequest,
    use_case: FromDishka[SamlMappingUseCase],
) -> RuleResult:
    """Apply the test.mozilla.com SAML email mapping."""
    return await use_case.execute(request)

"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI

from iam.interface.api.routes import health, rules
from iam.util.di.container import create_container, setup_di
from iam.util.observability import instrument_fastapi, instrument_httpx


def create_app(
    container: AsyncContainer | None = None, instrument: bool = True
) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container, defaults to the production container
        instrument: Whether to trace requests and directory calls with Logfire

    Returns:
        Configured application
    """
    if instrument:
        # Logfire must be configured before instrumentation
        instrument_httpx()

    app_instance = FastAPI(
        title="IAM Login Rules",
        description="Login-time rules for the identity provider: account linking by verified email and SAML attribute mapping",
        version="0.1.0",
    )

    if instrument:
        instrument_fastapi(app_instance)

    if container is None:
        container = create_container()
    setup_di(app_instance, container)

    app_instance.include_router(health.router)
    app_instance.include_router(rules.router)

    return app_instance

import os
from pathlib import Path
from textwrap import dedent
from typing import Any

import pydantic
from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from fastapi.routing import APIRoute
from loguru import logger

from dealerhub_api.db.errors import RepositoryError
from dealerhub_api.db.pool import DealerDBPool
from dealerhub_api.errors import DATABASE_ERRORS
from dealerhub_api.errors import handle_broad_exceptions
from dealerhub_api.errors import handle_database_errors
from dealerhub_api.errors import handle_pydantic_validation_errors
from dealerhub_api.errors import handle_repository_errors
from dealerhub_api.monitoring.logger import configure_logger
from dealerhub_api.monitoring.request_context import RequestContextMiddleware
from dealerhub_api.routes.routes_health import ROUTER_HEALTH
from dealerhub_api.routes.routes_leads import ROUTER_LEADS
from dealerhub_api.routes.routes_offers import ROUTER_OFFERS
from dealerhub_api.routes.routes_partners import ROUTER_PARTNERS
from dealerhub_api.routes.routes_rentals import ROUTER_RENTALS
from dealerhub_api.routes.routes_share import ROUTER_SHARE
from dealerhub_api.settings import Settings


def _detect_environment() -> str:
    """Detect where configuration is coming from."""
    if Path(".env").exists():
        return "local-env-file"
    return "env-vars"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create a FastAPI application.

    Configuration is loaded from environment variables via pydantic-settings
    (or a .env file in the working directory for local development).
    """
    settings = settings or Settings()

    configure_logger(level=settings.log_level)

    logger.info(
        "Configuration loaded successfully",
        environment=settings.environment,
        config_source=_detect_environment(),
        database_configured=bool(settings.database_url),
        dedupe_contacts=settings.dedupe_contacts,
    )

    app = FastAPI(
        title="Dealer Admin API",
        version="v1",
        description=dedent(
            """
        Back office for the car marketplace admin dashboard.

        | Area | Endpoints |
        | --- | --- |
        | Records | `/offers`, `/leads`, `/partners`, `/rentals/reservations`, `/rentals/clients` |
        | Sharing | `/share-offers`, `/share-leads`, `/partner-shares`, `/share-rentals`, `/share-history/{entity}` |

        The acting dealer is identified by the `X-Dealer-Id` header.
        """
        ),
        generate_unique_id_function=custom_generate_unique_id,
        swagger_ui_parameters={
            "defaultModelsExpandDepth": -1,
            "defaultModelExpandDepth": 1,
        },
    )
    app.state.settings = settings
    app.state.db_pool = None

    # Add request context middleware for tracking who/where requests come from
    app.add_middleware(RequestContextMiddleware)
    app.include_router(ROUTER_HEALTH, prefix="/api")
    app.include_router(ROUTER_OFFERS, prefix="/api")
    app.include_router(ROUTER_LEADS, prefix="/api")
    app.include_router(ROUTER_PARTNERS, prefix="/api")
    app.include_router(ROUTER_RENTALS, prefix="/api")
    app.include_router(ROUTER_SHARE, prefix="/api")

    if settings.database_url:
        app.state.db_pool = DealerDBPool(
            settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
        )

        @app.on_event("startup")
        async def startup_database():
            """Open the database pool and bootstrap the schema."""
            await app.state.db_pool.initialize()

        @app.on_event("shutdown")
        async def shutdown_database():
            """Close database connections."""
            await app.state.db_pool.close()

    else:
        logger.warning("DATABASE_URL not set - data endpoints will answer 503")

    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=RepositoryError,
        handler=handle_repository_errors,
    )
    for database_error in DATABASE_ERRORS:
        app.add_exception_handler(
            exc_class_or_status_code=database_error,
            handler=handle_database_errors,
        )

    app.middleware("http")(handle_broad_exceptions)

    app.openapi = lambda: custom_openapi_schema(app)

    logger.info("Starting Dealer Admin API application", pid=os.getpid())
    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


def custom_openapi_schema(app: FastAPI) -> dict[str, Any]:
    """Generate the OpenAPI schema once and cache it on the app."""
    if app.openapi_schema:
        return app.openapi_schema

    app.openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    return app.openapi_schema


if __name__ == "__main__":
    import uvicorn

    app = create_app()
    uvicorn.run(app, host="0.0.0.0", port=8000)

"""
Main FastAPI application entry point.

Uses Application Factory Pattern.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from sceau import __version__
from sceau.config.settings import Settings, get_settings
from sceau.di import DIContainer, set_container
from sceau.domain.exceptions import SceauException
from sceau.infrastructure.monitoring import get_logger, setup_logging
from sceau.presentation.api.middleware import (
    MetricsMiddleware,
    RequestIDMiddleware,
    sceau_exception_handler,
    validation_exception_handler,
)
from sceau.presentation.api.routes import health, sign_in


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[DIContainer] = None,
) -> FastAPI:
    """
    Application factory - creates and configures FastAPI app.

    Args:
        settings: Optional Settings instance (for testing)
        container: Optional pre-built DI container (for testing)

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()

    # Setup structured logging (JSON only in production)
    json_logs = settings.ENV == "production"
    setup_logging(level=settings.LOG_LEVEL, json_logs=json_logs)
    logger = get_logger(__name__)

    logger.info(f"Creating Sceau application (ENV={settings.ENV})")

    if container is None:
        container = DIContainer(settings)
    set_container(container)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info("Starting Sceau application...")
        await container.initialize()
        logger.info(
            f"Sceau ready: expected domain {settings.EXPECTED_DOMAIN}, "
            f"nonce store {type(container.nonce_store).__name__}"
        )

        yield

        logger.info("Shutting down Sceau application...")
        await container.shutdown()
        logger.info("Sceau application shutdown complete")

    app = FastAPI(
        title="Sceau API",
        description="Sign-In-With-Solana challenge issuance and verification",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.container = container

    # Middleware chain (last added runs first)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    app.add_exception_handler(SceauException, sceau_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Register routes
    app.include_router(sign_in.router, prefix=settings.API_PREFIX)
    app.include_router(health.router)

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint."""
        return {
            "service": settings.APP_NAME,
            "status": "running",
            "version": __version__,
            "expected_domain": settings.EXPECTED_DOMAIN,
        }

    if settings.METRICS_ENABLED:

        @app.get("/metrics", tags=["Monitoring"])
        async def metrics():
            """
            Prometheus metrics endpoint.

            Returns metrics in Prometheus text format for scraping.
            """
            return Response(
                content=generate_latest(),
                media_type=CONTENT_TYPE_LATEST,
            )

    logger.info("Sceau application created successfully")
    return app


def get_app() -> FastAPI:
    """
    Get or create application instance.

    For uvicorn: uvicorn sceau.main:get_app --factory
    """
    return create_app()


def main():
    """Run the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "sceau.main:get_app",
        factory=True,
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_RELOAD,
    )


if __name__ == "__main__":
    main()

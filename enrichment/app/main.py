"""
FastAPI Enrichment Application Factory
======================================

Entry point for the attribute enrichment service, which runs the external
attribute filter for authentication hosts that cannot embed it.

Architecture:
    Authentication host -> Enrichment service (this service) -> External origins

Routers:
    - /process : Run the filter on a pipeline state
    - /health  : Health check endpoint

Environment Variables:
    - ENRICHMENT_CONFIG_FILE: JSON filter configuration
    - INTERNAL_SHARED_SECRET: Secret required on /process (optional)
    - HTTP_TIMEOUT_SECONDS, HTTP_CONNECT_TIMEOUT_SECONDS, HTTP_VERIFY_TLS,
      HTTP_USER_AGENT: Outbound HTTP options
    - LOG_LEVEL: Logging level (default: INFO)

Running the Service:
    Development:
        uvicorn enrichment.app.main:app --reload --host 0.0.0.0 --port 8090

    Production:
        uvicorn enrichment.app.main:app --host 0.0.0.0 --port 8090 --workers 4
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn

from .config import Settings, get_settings, load_filter_config
from .filters import ExternalAttributeFilter
from .models import HealthResponse
from .process import process_router

logger = logging.getLogger("enrichment.main")


# Configure structured JSON logging
def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s", "module": "%(module)s", "function": "%(funcName)s"}',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def build_filter(settings: Settings) -> ExternalAttributeFilter:
    """
    Build the external attribute filter from settings.

    Raises:
        ConfigurationError: If the configuration file is invalid
    """
    config = {}
    if settings.ENRICHMENT_CONFIG_FILE:
        config = load_filter_config(settings.ENRICHMENT_CONFIG_FILE)
    else:
        logger.warning("ENRICHMENT_CONFIG_FILE not set, no attribute will be enriched")

    return ExternalAttributeFilter(config, context=settings.fetch_context())


def create_app(attribute_filter: Optional[ExternalAttributeFilter] = None) -> FastAPI:
    """
    Application factory function.

    Args:
        attribute_filter: Pre-built filter; built from settings at startup if omitted

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Build the filter on startup and release its HTTP client on shutdown.

        Configuration errors surface here, before any request is served.
        """
        setup_logging(settings.LOG_LEVEL)

        owns_filter = attribute_filter is None
        app.state.attribute_filter = build_filter(settings) if owns_filter else attribute_filter

        logger.info(
            "Enrichment service started",
            extra={"configured_attributes": len(app.state.attribute_filter.attributes_to_add)},
        )

        yield

        if owns_filter:
            app.state.attribute_filter.close()
        logger.info("Enrichment service shutdown complete")

    app = FastAPI(
        title="Attribute Enrichment Service",
        description="Enriches authenticated user attributes from external HTTP/JSON origins",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(process_router, tags=["Processing"])

    @app.get("/health", tags=["System"], response_model=HealthResponse)
    async def health_check(request: Request) -> HealthResponse:
        """Health check endpoint."""
        configured = getattr(request.app.state, "attribute_filter", None)
        return HealthResponse(
            configured_attributes=len(configured.attributes_to_add) if configured else 0,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Global exception handler for unhandled errors.

        Logs the error and returns a standardized error response.
        """
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "exception_type": type(exc).__name__
            },
            exc_info=True
        )

        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred",
                "detail": str(exc) if settings.LOG_LEVEL == "DEBUG" else None
            }
        )

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    settings = get_settings()

    uvicorn.run(
        "enrichment.app.main:app",
        host=settings.SERVICE_HOST,
        port=settings.SERVICE_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )

"""
HTTP Application Entry Point

This module defines the FastAPI application instance, registers all routers,
configures global exception handling, and provides a test-friendly application
factory.

Design Goals
------------
- Fail-fast wiki configuration validation at startup
- Centralized router registration
- Global exception safety net
- Test-friendly via create_app()
"""

from __future__ import annotations

import logging
from fastapi import FastAPI

from .api import health_routes, tool_routes
from .api.dependencies import get_registry
from .core.errors import registry_exception_handler, unhandled_exception_handler
from .wiki.registry import WikiRegistryError


logger = logging.getLogger("mcp.app")


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    app = FastAPI(
        title="mw-edit-mcp",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # --------------------------------------------------------------
    # Global Exception Handling
    # --------------------------------------------------------------

    app.add_exception_handler(WikiRegistryError, registry_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --------------------------------------------------------------
    # Router Registration
    # --------------------------------------------------------------

    app.include_router(health_routes.router)
    app.include_router(tool_routes.router)

    # --------------------------------------------------------------
    # Startup Validation Hook
    # --------------------------------------------------------------

    @app.on_event("startup")
    async def _startup_validation() -> None:
        """
        Build the wiki registry now so a bad config aborts startup instead of
        failing the first tool call.
        """
        logger.info("Starting mw-edit-mcp")

        registry = app.dependency_overrides.get(get_registry, get_registry)()
        profile = registry.get_current_profile()

        logger.info("Current wiki: %s (%s)", profile.site_name, profile.server)

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        logger.info("Shutting down mw-edit-mcp")

    return app


# ---------------------------------------------------------------------
# Default Application Instance (for Uvicorn)
# ---------------------------------------------------------------------

app = create_app()

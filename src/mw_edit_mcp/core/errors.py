"""
Global Error Handling

Application-wide exception handlers for the HTTP surface.

Tool failures never reach these handlers: the dispatch layer turns them into
error-flagged tool results. What remains are faults outside a tool call
(e.g. a registry that failed to build), which must not leak internals.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import Request
from fastapi.responses import JSONResponse

from ..wiki.registry import WikiRegistryError

logger = logging.getLogger("mcp.errors")


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def registry_exception_handler(
    request: Request,
    exc: WikiRegistryError,
) -> JSONResponse:
    """
    Report wiki configuration errors as 503: the server is up but cannot
    serve any wiki until the config is fixed.
    """
    logger.error("Wiki configuration error on %s: %s", request.url.path, exc)

    payload: Dict[str, Any] = {
        "error": "wiki_configuration_error",
        "detail": str(exc),
    }
    return JSONResponse(status_code=503, content=payload)


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Logs the full traceback internally and returns a generic 500 with no
    internal details.
    """
    logger.exception(
        "Unhandled MCP exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    payload: Dict[str, Any] = {
        "error": "internal_server_error",
        "detail": "Internal server error",
    }

    return JSONResponse(
        status_code=500,
        content=payload,
    )

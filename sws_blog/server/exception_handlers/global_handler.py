"""
Exception Handlers for the FastAPI Application.

Domain errors raised by the service layer are mapped to their HTTP status.
Anything else reaches the global handler, which logs the request context
under a generated error id and answers a generic 500.
"""

import traceback
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sws_blog.core.errors import SwsBlogError, UpstreamServiceError
from sws_blog.core.logging_config import get_logger
from sws_blog.core.monitoring import log_error

logger = get_logger(__name__)


async def domain_exception_handler(request: Request, exc: SwsBlogError) -> JSONResponse:
    """
    Translate a service-layer error into ``{"detail": message}`` with its status code.

    Args:
        request: The HTTP request that raised the error
        exc: The domain error

    Returns:
        JSONResponse carrying the error message
    """
    if isinstance(exc, UpstreamServiceError):
        logger.warning(
            f"Upstream failure in {request.method} {request.url.path}: {exc.message}",
            extra={"upstream_status": exc.upstream_status, "details": exc.details},
        )
        log_error(type(exc).__name__, exc.message, {"path": request.url.path})
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    This handler is called for any unhandled exception in the application.
    It logs the full error context and returns a JSON response with an error ID
    that clients can use to reference the error when reporting issues.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = uuid.uuid4().hex

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )
    log_error(type(exc).__name__, str(exc), {"error_id": error_id, "path": request.url.path})

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": type(exc).__name__,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(SwsBlogError, domain_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")

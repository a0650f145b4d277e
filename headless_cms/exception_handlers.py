"""
Exception handlers rendering the JSON error envelope:

    {"error": {"status_code": 404, "error_code": "NOT_FOUND",
               "message": "Content model with id 'product' not found",
               "type": "Not Found", "details": {...}, "path": "/graphql/headless/models/product"}}

Errors raised while a GraphQL operation executes never reach these handlers;
they are reported in the operation's ``errors`` list or the response wrapper.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from headless_cms.exceptions import CMSException

logger = logging.getLogger(__name__)

_ERROR_TYPES = {
    400: "Bad Request",
    404: "Not Found",
    422: "Validation Error",
    500: "Internal Server Error",
    503: "Service Unavailable",
    504: "Gateway Timeout",
}


def get_error_type(status_code: int) -> str:
    return _ERROR_TYPES.get(status_code, "Error")


def create_error_response(
    request: Request,
    status_code: int,
    message: str,
    error_code: str | None = None,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    error: dict[str, Any] = {
        "status_code": status_code,
        "message": message,
        "type": get_error_type(status_code),
        "path": request.url.path,
    }
    if error_code:
        error["error_code"] = error_code
    if details:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"error": error})


async def cms_exception_handler(request: Request, exc: CMSException) -> JSONResponse:
    logger.error("%s: %s", type(exc).__name__, exc.message, extra={"status_code": exc.status_code, "path": request.url.path})
    return create_error_response(request, exc.status_code, exc.message, exc.error_code, exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning("HTTP %s: %s", exc.status_code, exc.detail, extra={"path": request.url.path})
    return create_error_response(request, exc.status_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Flatten pydantic errors into ``{field, message, type}`` entries."""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.warning("Request validation failed on %s", request.url.path)
    return create_error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation error",
        "VALIDATION_FAILED",
        {"validation_errors": errors},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CMSException, cms_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

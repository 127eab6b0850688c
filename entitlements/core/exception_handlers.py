"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain exceptions to HTTP
responses; capability and ownership denials share the 403 denial body.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from entitlements.core.config import get_settings
from entitlements.domain.exceptions import EntitlementException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "AUTHENTICATION_ERROR": 401,
    "CAPABILITY_DENIED": 403,
    "OWNERSHIP_DENIED": 403,
    "RESOURCE_NOT_FOUND": 404,
    "CATALOG_CONFLICT": 409,
    "CATALOG_IN_USE": 409,
    "SYSTEM_ROLE_PROTECTED": 409,
    "SERVICE_UNAVAILABLE": 503,
}

_DENIAL_CODES = frozenset({"CAPABILITY_DENIED", "OWNERSHIP_DENIED"})


def _entitlement_exception_handler(
    request: Request, exc: EntitlementException
) -> JSONResponse:
    """Return JSON from EntitlementException.to_dict() with appropriate status code."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if exc.error_code in _DENIAL_CODES:
        logger.info(
            "Access denied: %s %s %s details=%s",
            request.method,
            request.url.path,
            exc.error_code,
            exc.details,
        )
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=headers)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": _jsonable_errors(exc),
        },
    )


def _jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Strip non-serializable context (e.g. exception instances) from pydantic errors."""
    return [
        {k: v for k, v in err.items() if k in ("type", "loc", "msg")}
        for err in exc.errors()
    ]


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": "HTTP_ERROR", "message": exc.detail},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: EntitlementException (and
    subclasses), RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(EntitlementException, _entitlement_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)

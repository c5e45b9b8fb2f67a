"""
Exception handlers producing the JSON error envelope
"""
import logging
import traceback

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, OperationalError

from app.core.config import settings
from app.core.exceptions import AppError

logger = logging.getLogger(__name__)

_HTTP_KINDS = {
    status.HTTP_400_BAD_REQUEST: "VALIDATION_ERROR",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_409_CONFLICT: "CONFLICT",
}


def _envelope(request: Request, status_code: int, kind: str, detail, **extra) -> JSONResponse:
    content = {
        "error": True,
        "status_code": status_code,
        "kind": kind,
        "detail": detail,
        "path": str(request.url.path),
    }
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """
    Handle domain errors raised by services

    Args:
        request: FastAPI request object
        exc: AppError instance

    Returns:
        JSONResponse with the error kind and message
    """
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", exc.kind, request.url.path, exc.message)
    else:
        logger.info("%s on %s: %s", exc.kind, request.url.path, exc.message)
    return _envelope(request, exc.status_code, exc.kind, exc.message)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Handle HTTPException with consistent JSON response format

    Args:
        request: FastAPI request object
        exc: HTTPException instance

    Returns:
        JSONResponse with error details
    """
    kind = _HTTP_KINDS.get(exc.status_code, "ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "status_code": exc.status_code,
            "kind": kind,
            "detail": exc.detail,
            "path": str(request.url.path)
        },
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle RequestValidationError with consistent JSON response format

    Does not leak internal validation details in production.
    """
    if settings.APP_ENV == "prod":
        return _envelope(
            request,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "VALIDATION_ERROR",
            "Validation error: Invalid request data",
        )

    # Sanitize for JSON: e.g. ctx.error ValueError -> str
    errors = []
    for e in exc.errors():
        err = dict(e)
        if "ctx" in err and isinstance(err["ctx"], dict):
            ctx = {k: (str(v) if not isinstance(v, (str, int, float, bool, type(None))) else v) for k, v in err["ctx"].items()}
            err["ctx"] = ctx
        errors.append(err)
    return _envelope(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Validation error",
        errors=errors,
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """
    Uniqueness violations that slipped past service-level checks (e.g. two
    concurrent clock-ins) surface as a conflict rather than a 500.
    """
    logger.warning("Integrity error on %s: %s", request.url.path, exc.orig)
    return _envelope(
        request,
        status.HTTP_409_CONFLICT,
        "CONFLICT",
        "Request conflicts with existing data",
    )


async def operational_error_handler(request: Request, exc: OperationalError) -> JSONResponse:
    logger.error("Database error on %s: %s", request.url.path, exc, exc_info=True)
    return _envelope(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "Database unavailable" if settings.APP_ENV == "prod" else str(exc.orig),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions with consistent JSON response format

    Does not leak internal error details in production.
    """
    logger.error("Unhandled exception: %s", exc, exc_info=True)

    if settings.APP_ENV == "prod":
        return _envelope(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "INTERNAL_ERROR",
            "Internal server error",
        )

    return _envelope(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        str(exc),
        traceback=traceback.format_exc() if settings.APP_ENV == "local" else None,
    )

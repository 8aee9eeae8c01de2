from __future__ import annotations

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from eventhall.services.exceptions import (
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    ValidationError,
)

logger = structlog.get_logger()


def status_for(err: ServiceError) -> int:
    if isinstance(err, NotFoundError):
        return 404
    if isinstance(err, PermissionDeniedError):
        return 403
    if isinstance(err, ConflictError):
        return 409
    if isinstance(err, (ValidationError, BusinessRuleError)):
        return 422
    return 500


def http_error_from_service(err: ServiceError) -> HTTPException:
    detail = {"code": err.code, "message": err.message, **err.extra}
    return HTTPException(status_code=status_for(err), detail=detail)


def _field_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for item in exc.errors():
        # Drop the "body"/"query" prefix so keys match field names.
        loc = [str(part) for part in item.get("loc", ()) if part not in ("body", "query", "path")]
        errors.setdefault(".".join(loc) or "__root__", []).append(item.get("msg", "invalid value"))
    return errors


async def _service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    err = http_error_from_service(exc)
    if err.status_code >= 500:
        logger.error("service_error", code=exc.code, path=request.url.path)
    return JSONResponse(status_code=err.status_code, content={"detail": err.detail})


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "detail": {
                "code": "validation_failed",
                "message": "the given data was invalid",
                "errors": _field_errors(exc),
            }
        },
    )


async def _integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("integrity_error", path=request.url.path, error=str(exc.orig))
    return JSONResponse(
        status_code=409,
        content={"detail": {"code": "conflict", "message": "conflicting record"}},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, _service_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(IntegrityError, _integrity_error_handler)

"""Custom exceptions and RFC 7807 Problem Detail error handlers."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

BASE_ERROR_URI = "https://hrms.local/errors"


# ── Exception hierarchy ─────────────────────────────────────────────

class AppException(Exception):
    """Base for all application exceptions → RFC 7807 JSON."""

    def __init__(
        self,
        status_code: int,
        error_type: str,
        title: str,
        detail: str,
        code: str,
        errors: Optional[dict[str, Any]] = None,
    ) -> None:
        self.status_code = status_code
        self.error_type = error_type
        self.title = title
        self.detail = detail
        self.code = code
        self.errors = errors
        super().__init__(detail)


class ValidationException(AppException):
    """400 — malformed or missing input."""

    def __init__(
        self,
        detail: str,
        *,
        field: Optional[str] = None,
        code: str = "VALIDATION_ERROR",
        title: str = "Validation Error",
    ) -> None:
        super().__init__(
            status_code=400,
            error_type="validation-error",
            title=title,
            detail=detail,
            code=code,
            errors={field: [detail]} if field else None,
        )
        self.field = field


class MissingHeaderException(ValidationException):
    """400 — a required request header is absent."""

    def __init__(self, header: str) -> None:
        super().__init__(
            f"{header} header is required",
            field=header,
            code="MISSING_HEADER",
            title="Missing Header",
        )


class DuplicateException(ValidationException):
    """400 — unique-constraint / duplicate, surfaced as a validation failure."""

    def __init__(self, field: str, value: Any) -> None:
        super().__init__(
            f"An entry with {field}='{value}' already exists.",
            field=field,
            code="DUPLICATE_RECORD",
            title="Duplicate Record",
        )


class InvalidStateTransitionException(ValidationException):
    """400 — lifecycle transition not allowed from the current status."""

    def __init__(self, current: str, action: str) -> None:
        super().__init__(
            f"Cannot {action} an employee whose status is {current}.",
            field="status",
            code="INVALID_STATE_TRANSITION",
            title="Invalid State Transition",
        )


class NotFoundException(AppException):
    """404 — entity not found (or owned by another tenant)."""

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(
            status_code=404,
            error_type="not-found",
            title=f"{entity_type} Not Found",
            detail=f"{entity_type.lower()} not found (id '{entity_id}').",
            code="NOT_FOUND",
        )
        self.entity_type = entity_type
        self.entity_id = entity_id


class StorageException(AppException):
    """500 — persistence or required-collaborator failure.

    ``operation`` names what was being attempted; the underlying cause is
    kept on ``__cause__`` for logs and never rendered to the caller.
    """

    def __init__(
        self,
        operation: str,
        *,
        code: str = "STORAGE_ERROR",
    ) -> None:
        super().__init__(
            status_code=500,
            error_type="storage-error",
            title="Storage Error",
            detail=f"Failed to {operation}.",
            code=code,
        )
        self.operation = operation


class InternalException(AppException):
    """500 — programming or context errors."""

    def __init__(self, detail: str = "An internal server error occurred.") -> None:
        super().__init__(
            status_code=500,
            error_type="internal-error",
            title="Internal Server Error",
            detail=detail,
            code="INTERNAL_ERROR",
        )


# ── RFC 7807 builder ────────────────────────────────────────────────

def _build_problem_detail(exc: AppException, request: Request) -> dict[str, Any]:
    body: dict[str, Any] = {
        "type": f"{BASE_ERROR_URI}/{exc.error_type}",
        "title": exc.title,
        "status": exc.status_code,
        "code": exc.code,
        "detail": exc.detail,
        "instance": str(request.url.path),
    }
    if exc.errors:
        body["errors"] = exc.errors
    return body


# ── FastAPI handlers ────────────────────────────────────────────────

async def _handle_app_exception(
    request: Request,
    exc: AppException,
) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc.detail,
            exc_info=exc.__cause__,
        )
    else:
        logger.info(
            "%s %s rejected (%s): %s",
            request.method, request.url.path, exc.code, exc.detail,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=_build_problem_detail(exc, request),
        media_type="application/problem+json",
    )


async def _handle_validation_error(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    field_errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = err.get("loc", ())
        name = (
            ".".join(str(p) for p in loc[1:])
            if len(loc) > 1
            else str(loc[0]) if loc else "unknown"
        )
        field_errors.setdefault(name, []).append(err.get("msg", "Invalid value"))

    return JSONResponse(
        status_code=400,
        content={
            "type": f"{BASE_ERROR_URI}/validation-error",
            "title": "Validation Error",
            "status": 400,
            "code": "VALIDATION_ERROR",
            "detail": "Request validation failed.",
            "instance": str(request.url.path),
            "errors": field_errors,
        },
        media_type="application/problem+json",
    )


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=_build_problem_detail(InternalException(), request),
        media_type="application/problem+json",
    )


# ── Registration helper (called from main.py) ──────────────────────

def register_exception_handlers(app: FastAPI) -> None:
    """Attach all custom exception handlers to the FastAPI app."""
    app.add_exception_handler(AppException, _handle_app_exception)          # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _handle_unexpected_error)

"""Error values, their HTTP rendering, and exception handler registration.

Every failure a request can end in is one of a closed set of error values.
:func:`render` turns any of them into a ``(status, body)`` pair and performs
the diagnostic logging for it exactly once. Client bodies never contain the
underlying cause; operators get it in the log.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import logging
from typing import Any
from typing import Union

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.base import RequestResponseEndpoint

from tracker.validation.rules import FieldViolation
from tracker.validation.rules import ValidationFailureSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cause:
    """Underlying exception plus a short note on what was being attempted."""

    error: BaseException
    context: str = ""


@dataclass(frozen=True)
class Internal:
    """Unexpected or unclassified failure."""

    cause: Cause | None = None


@dataclass(frozen=True)
class Service:
    """Known rejection with a machine-readable code."""

    status_code: int
    code: str
    cause: Cause | None = None


@dataclass(frozen=True)
class StructuredBody:
    """Rejection with a caller-supplied JSON body."""

    status_code: int
    body: Any
    cause: Cause | None = None


@dataclass(frozen=True)
class Validation:
    """Aggregated field-level rejection."""

    failures: ValidationFailureSet


@dataclass(frozen=True)
class SingleFieldValidation:
    """One violation on one field, e.g. a uniqueness conflict."""

    field: str
    code: str
    message: str | None = None


ErrorValue = Union[Internal, Service, StructuredBody, Validation, SingleFieldValidation]


class AppError(Exception):
    """Carries an :data:`ErrorValue` out of a handler to the registered responder."""

    def __init__(self, value: ErrorValue) -> None:
        super().__init__(value)
        self.value = value


def not_found(code: str = "not_found") -> AppError:
    return AppError(Service(status.HTTP_404_NOT_FOUND, code))


def internal(error: BaseException, context: str) -> AppError:
    return AppError(Internal(Cause(error, context)))


def _log_cause(cause: Cause) -> None:
    logger.error(
        "%s: %r",
        cause.context or "request failed",
        cause.error,
        exc_info=(type(cause.error), cause.error, cause.error.__traceback__),
    )


def _serialize_failures(failures: ValidationFailureSet) -> dict[str, list[dict[str, str]]]:
    if not failures:
        raise ValueError("validation error raised with an empty failure set")
    return failures.to_dict()


def render(value: ErrorValue) -> tuple[int, Any]:
    """Map an error value to an HTTP status and JSON body."""

    if isinstance(value, Internal):
        if value.cause is not None:
            _log_cause(value.cause)
        else:
            logger.error("Internal server error")
        return status.HTTP_500_INTERNAL_SERVER_ERROR, {}

    if isinstance(value, Service):
        return render(StructuredBody(value.status_code, {"error": value.code}, value.cause))

    if isinstance(value, StructuredBody):
        if value.cause is not None:
            _log_cause(value.cause)
        return value.status_code, value.body

    if isinstance(value, Validation):
        try:
            errors = _serialize_failures(value.failures)
        except (TypeError, ValueError):
            return render(Internal())
        return render(
            StructuredBody(
                status.HTTP_400_BAD_REQUEST,
                {"error": "validation", "errors": errors},
            )
        )

    if isinstance(value, SingleFieldValidation):
        violation = FieldViolation(
            field=value.field,
            code=value.code,
            message=value.message or value.code,
        )
        return render(Validation(ValidationFailureSet([violation])))

    logger.error("Unrecognized error value %r", value)
    return render(Internal())


def _build_error_response(value: ErrorValue, headers: Mapping[str, str] | None = None) -> JSONResponse:
    status_code, body = render(value)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def _http_error_code(status_code: int) -> str:
    if status_code == status.HTTP_404_NOT_FOUND:
        return "not_found"
    if status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        return "method_not_allowed"
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return "internal_error"
    return "bad_request"


def _format_location(location: tuple[Any, ...] | list[Any] | Any) -> str:
    if not isinstance(location, (tuple, list)):
        return str(location)

    prefixes = {"body", "query", "path", "header", "cookie"}
    filtered = [str(part) for part in location if part not in prefixes]
    if filtered:
        return ".".join(filtered)

    if not location:
        return "request"

    return str(location[0])


def _request_validation_failures(exc: RequestValidationError) -> ValidationFailureSet:
    failures = ValidationFailureSet()
    for issue in exc.errors():
        failures.add(
            FieldViolation(
                field=_format_location(issue.get("loc", ())),
                code=str(issue.get("type", "invalid")),
                message=str(issue.get("msg", "Invalid value")),
            )
        )
    return failures


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    """Render error values raised by handlers."""

    return _build_error_response(exc.value)


async def request_validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Render framework parameter validation errors as a validation failure set."""

    failures = _request_validation_failures(exc)
    if not failures:
        return _build_error_response(Service(status.HTTP_400_BAD_REQUEST, "bad_request"))
    return _build_error_response(Validation(failures))


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing-level HTTP exceptions with a stable code."""

    return _build_error_response(
        Service(exc.status_code, _http_error_code(exc.status_code)),
        headers=exc.headers,
    )


async def render_unhandled_errors(request: Request, call_next: RequestResponseEndpoint) -> Response:
    """Turn exceptions no handler claimed into an opaque 500 without re-raising."""

    try:
        return await call_next(request)
    except Exception as exc:
        return _build_error_response(Internal(Cause(exc, "unhandled exception")))


def register_error_handlers(app: FastAPI) -> None:
    """Attach all error handlers to a FastAPI app instance."""

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_middleware(BaseHTTPMiddleware, dispatch=render_unhandled_errors)

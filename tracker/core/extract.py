"""Typed request body extraction with field validation."""

from __future__ import annotations

from collections.abc import Awaitable
from collections.abc import Callable
import logging
from typing import TypeVar

from fastapi import Request
from fastapi import status
from pydantic import BaseModel
from pydantic import ValidationError

from tracker.core.errors import AppError
from tracker.core.errors import Service
from tracker.core.errors import Validation
from tracker.validation.rules import validate

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def extract(raw: bytes | str, shape: type[ModelT]) -> ModelT:
    """Parse ``raw`` into ``shape`` and run its registered field rules.

    Raises :class:`AppError` carrying ``Service(400, "invalid_json")`` when the
    body is not JSON of the expected shape, or ``Validation`` when any field
    rule fails.
    """
    try:
        payload = shape.model_validate_json(raw)
    except ValidationError as exc:
        logger.error("Rejected %s request body: %s", shape.__name__, exc)
        raise AppError(Service(status.HTTP_400_BAD_REQUEST, "invalid_json")) from exc

    failures = validate(payload, getattr(shape, "validation_rules", ()))
    if failures:
        raise AppError(Validation(failures))
    return payload


def validated_body(shape: type[ModelT]) -> Callable[[Request], Awaitable[ModelT]]:
    """Build a dependency that yields a validated ``shape`` from the request body."""

    async def dependency(request: Request) -> ModelT:
        return extract(await request.body(), shape)

    dependency.__name__ = f"validated_{shape.__name__}"
    return dependency

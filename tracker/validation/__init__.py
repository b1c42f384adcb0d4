"""Field-level validation rules for request payloads."""

from tracker.validation.rules import Email
from tracker.validation.rules import FieldViolation
from tracker.validation.rules import MinLength
from tracker.validation.rules import ValidationFailureSet
from tracker.validation.rules import validate

__all__ = [
    "Email",
    "FieldViolation",
    "MinLength",
    "ValidationFailureSet",
    "validate",
]

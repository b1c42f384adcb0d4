"""Declarative per-field validation rules and the engine that evaluates them.

Payload shapes register their constraints as an explicit sequence of
``(field_name, rule)`` pairs. :func:`validate` walks every pair and collects
every violation, so a bad ``name`` never hides a bad ``email``.
"""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Iterator
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any
from typing import Protocol

from email_validator import EmailNotValidError
from email_validator import validate_email


@dataclass(frozen=True)
class FieldViolation:
    """One failed rule on one field."""

    field: str
    code: str
    message: str


class ValidationFailureSet:
    """Violations collected for a payload, keyed by field name.

    A field may carry several violations. Entries are kept in the order they
    were added and are never deduplicated.
    """

    def __init__(self, violations: Iterable[FieldViolation] = ()) -> None:
        self._violations: list[FieldViolation] = list(violations)

    def add(self, violation: FieldViolation) -> None:
        self._violations.append(violation)

    def __iter__(self) -> Iterator[FieldViolation]:
        return iter(self._violations)

    def __len__(self) -> int:
        return len(self._violations)

    def __bool__(self) -> bool:
        return bool(self._violations)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationFailureSet):
            return NotImplemented
        return self._violations == other._violations

    def __repr__(self) -> str:
        return f"ValidationFailureSet({self._violations!r})"

    @property
    def fields(self) -> list[str]:
        """Distinct field names in first-seen order."""
        return list(dict.fromkeys(violation.field for violation in self._violations))

    def to_dict(self) -> dict[str, list[dict[str, str]]]:
        """Group violations as ``{field: [{"code": ..., "message": ...}, ...]}``."""
        grouped: dict[str, list[dict[str, str]]] = {}
        for violation in self._violations:
            grouped.setdefault(violation.field, []).append(
                {"code": violation.code, "message": violation.message}
            )
        return grouped


class Rule(Protocol):
    """A single constraint applied to one field value."""

    code: str

    def check(self, field: str, value: Any) -> FieldViolation | None:
        ...


@dataclass(frozen=True)
class MinLength:
    """String must be at least ``minimum`` characters long."""

    minimum: int
    code: str = "length"

    def check(self, field: str, value: Any) -> FieldViolation | None:
        if isinstance(value, str) and len(value) >= self.minimum:
            return None
        return FieldViolation(
            field=field,
            code=self.code,
            message=f"{field} must be at least {self.minimum} characters long",
        )


@dataclass(frozen=True)
class Email:
    """String must be a syntactically valid email address."""

    code: str = "email"

    def check(self, field: str, value: Any) -> FieldViolation | None:
        if isinstance(value, str):
            try:
                validate_email(value, check_deliverability=False)
                return None
            except EmailNotValidError:
                pass
        return FieldViolation(
            field=field,
            code=self.code,
            message=f"{field} must be a valid email address",
        )


FieldRules = Sequence[tuple[str, Rule]]


def validate(value: Any, rules: FieldRules) -> ValidationFailureSet:
    """Evaluate every registered rule against ``value`` and collect violations."""
    failures = ValidationFailureSet()
    for field, rule in rules:
        violation = rule.check(field, getattr(value, field, None))
        if violation is not None:
            failures.add(violation)
    return failures

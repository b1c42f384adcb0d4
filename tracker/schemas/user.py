"""Pydantic schemas for user API payloads."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel
from pydantic import ConfigDict

from tracker.validation.rules import Email
from tracker.validation.rules import FieldRules
from tracker.validation.rules import MinLength

NAME_MIN_LENGTH = 3

USER_FIELD_RULES: FieldRules = (
    ("name", MinLength(NAME_MIN_LENGTH)),
    ("email", Email()),
)


class UserCreate(BaseModel):
    """Payload to create a user."""

    model_config = ConfigDict(strict=True)

    validation_rules: ClassVar[FieldRules] = USER_FIELD_RULES

    name: str
    email: str


class UserUpdate(BaseModel):
    """Payload to replace a user's mutable fields."""

    model_config = ConfigDict(strict=True)

    validation_rules: ClassVar[FieldRules] = USER_FIELD_RULES

    name: str
    email: str


class User(BaseModel):
    """User response payload."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str

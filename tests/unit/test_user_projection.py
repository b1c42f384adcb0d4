"""Unit tests for the public user projection."""

from __future__ import annotations

from datetime import datetime
from datetime import timezone

from tracker.db.models.user import User
from tracker.schemas.user import UserCreate
from tracker.services.users import to_response


def _stored_user(**overrides) -> User:
    now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    values = {
        "id": 7,
        "name": "alice",
        "email": "alice@example.com",
        "created_at": now,
        "updated_at": now,
        "deleted_at": None,
    }
    values.update(overrides)
    return User(**values)


def test_projection_exposes_only_public_fields() -> None:
    payload = to_response(_stored_user()).model_dump()

    assert payload == {"id": 7, "name": "alice", "email": "alice@example.com"}


def test_projection_omits_soft_delete_marker() -> None:
    deleted = _stored_user(deleted_at=datetime(2024, 6, 1, tzinfo=timezone.utc))

    assert "deleted_at" not in to_response(deleted).model_dump()


def test_projection_keeps_every_user_supplied_field() -> None:
    submitted = UserCreate(name="bob the builder", email="bob@example.com")

    projected = to_response(_stored_user(name=submitted.name, email=submitted.email)).model_dump()
    projected.pop("id")

    assert projected == submitted.model_dump()

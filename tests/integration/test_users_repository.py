"""Store-level tests for user repository primitives and unique indexes."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import tracker.services.users as users_service
from tracker.db.models.user import User
from tracker.db.repository.users import create_user
from tracker.db.repository.users import get_user
from tracker.db.repository.users import list_users
from tracker.db.repository.users import soft_delete_user
from tracker.db.repository.users import update_user
from tracker.db.repository.users import user_exists


def _seed(session: Session, name: str, email: str) -> User:
    user = create_user(session, name=name, email=email)
    session.commit()
    return user


def test_create_returns_generated_id_and_timestamps(session: Session) -> None:
    user = _seed(session, "alice", "alice@example.com")

    assert user.id is not None
    assert user.created_at is not None
    assert user.updated_at is not None
    assert user.deleted_at is None


def test_soft_delete_hides_row_but_keeps_it_stored(session: Session) -> None:
    user = _seed(session, "alice", "alice@example.com")

    soft_delete_user(session, user.id)
    session.commit()

    assert get_user(session, user.id) is None
    assert list_users(session) == []
    assert not user_exists(session, user_id=user.id)
    stored = session.execute(select(User.deleted_at).where(User.id == user.id)).scalar_one()
    assert stored is not None


def test_exists_predicates_skip_deleted_and_excluded_rows(session: Session) -> None:
    alice = _seed(session, "alice", "alice@example.com")
    bob = _seed(session, "bob", "bob@example.com")

    assert user_exists(session, email="alice@example.com")
    assert not user_exists(session, email="alice@example.com", exclude_id=alice.id)
    assert user_exists(session, name="alice", exclude_id=bob.id)

    soft_delete_user(session, alice.id)
    session.commit()

    assert not user_exists(session, email="alice@example.com")


def test_update_returns_none_for_deleted_rows(session: Session) -> None:
    user = _seed(session, "alice", "alice@example.com")
    soft_delete_user(session, user.id)
    session.commit()

    assert update_user(session, user.id, name="alice2", email="alice2@example.com") is None


def test_active_duplicates_are_rejected_by_unique_index(session: Session) -> None:
    _seed(session, "alice", "alice@example.com")

    with pytest.raises(IntegrityError):
        create_user(session, name="alice-2", email="alice@example.com")
    session.rollback()

    with pytest.raises(IntegrityError):
        create_user(session, name="alice", email="alice-2@example.com")
    session.rollback()


@pytest.mark.parametrize(
    ("body", "field"),
    [
        ({"name": "alice-2", "email": "alice@example.com"}, "email"),
        ({"name": "alice", "email": "alice-2@example.com"}, "name"),
    ],
)
def test_race_past_precheck_is_reported_as_conflict(
    client: TestClient,
    monkeypatch: pytest.MonkeyPatch,
    body: dict,
    field: str,
) -> None:
    assert client.post("/users/", json={"name": "alice", "email": "alice@example.com"}).status_code == 200
    monkeypatch.setattr(users_service, "user_exists", lambda *args, **kwargs: False)

    response = client.post("/users/", json=body)

    assert response.status_code == 400
    assert list(response.json()["errors"]) == [field]
    assert response.json()["errors"][field][0]["code"] == f"{field}_exists"

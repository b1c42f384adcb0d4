"""Service helpers for user API operations."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tracker.core.errors import AppError
from tracker.core.errors import SingleFieldValidation
from tracker.core.errors import internal
from tracker.core.errors import not_found
from tracker.db.models.user import User
from tracker.db.repository.users import create_user
from tracker.db.repository.users import get_user
from tracker.db.repository.users import list_users
from tracker.db.repository.users import soft_delete_user
from tracker.db.repository.users import update_user
from tracker.db.repository.users import user_exists
from tracker.schemas.user import User as UserResponse
from tracker.schemas.user import UserCreate
from tracker.schemas.user import UserUpdate

logger = logging.getLogger(__name__)

# Store-level markers identifying the partial unique index that rejected a row,
# as reported by PostgreSQL (index name) or SQLite (table.column).
_UNIQUE_MARKERS = {
    "email": ("uq_users_email_active", "users.email"),
    "name": ("uq_users_name_active", "users.name"),
}


def _conflict(field: str, code: str, message: str) -> AppError:
    return AppError(SingleFieldValidation(field, code, message))


def _conflicting_field(exc: IntegrityError) -> str | None:
    diag = getattr(exc.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    detail = constraint or str(exc.orig)
    for field, markers in _UNIQUE_MARKERS.items():
        if any(marker in detail for marker in markers):
            return field
    return None


def to_response(user: User) -> UserResponse:
    """Project a stored user onto its public shape."""
    return UserResponse.model_validate(user)


def list_users_service(session: Session) -> list[UserResponse]:
    """List active users."""
    try:
        users = list_users(session)
    except SQLAlchemyError as exc:
        raise internal(exc, "listing users") from exc
    return [to_response(user) for user in users]


def get_user_service(session: Session, user_id: int) -> UserResponse:
    """Fetch an active user or raise not found."""
    try:
        user = get_user(session, user_id)
    except SQLAlchemyError as exc:
        raise internal(exc, f"fetching user {user_id}") from exc
    if user is None:
        raise not_found()
    return to_response(user)


def create_user_service(session: Session, payload: UserCreate) -> UserResponse:
    """Create a user after checking email, then name, for active duplicates."""
    try:
        if user_exists(session, email=payload.email):
            raise _conflict("email", "email_exists", "email is already registered")
        if user_exists(session, name=payload.name):
            raise _conflict("name", "name_exists", "name is already taken")

        user = create_user(session, name=payload.name, email=payload.email)
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        field = _conflicting_field(exc)
        if field is None:
            raise internal(exc, "inserting user") from exc
        logger.warning("Concurrent insert rejected by unique index on users.%s", field)
        raise _conflict(field, f"{field}_exists", f"{field} is already in use") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise internal(exc, "creating user") from exc

    return to_response(user)


def update_user_service(session: Session, user_id: int, payload: UserUpdate) -> UserResponse:
    """Replace name and email of an active user."""
    try:
        if not user_exists(session, user_id=user_id):
            raise not_found()
        if user_exists(session, name=payload.name, exclude_id=user_id):
            raise _conflict("name", "name_used_by_another_user", "name is used by another user")
        if user_exists(session, email=payload.email, exclude_id=user_id):
            raise _conflict("email", "email_used_by_another_user", "email is used by another user")

        user = update_user(session, user_id, name=payload.name, email=payload.email)
        if user is None:
            session.rollback()
            raise not_found("user_not_found")
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        field = _conflicting_field(exc)
        if field is None:
            raise internal(exc, f"updating user {user_id}") from exc
        raise _conflict(
            field, f"{field}_used_by_another_user", f"{field} is used by another user"
        ) from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise internal(exc, f"updating user {user_id}") from exc

    return to_response(user)


def remove_user_service(session: Session, user_id: int) -> None:
    """Soft-delete an active user; a second call reports not found."""
    try:
        if not user_exists(session, user_id=user_id):
            raise not_found()
        soft_delete_user(session, user_id)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        raise internal(exc, f"removing user {user_id}") from exc

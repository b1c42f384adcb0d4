"""Repository primitives for user entities.

Every read here ignores soft-deleted rows.
"""

from __future__ import annotations

from datetime import datetime
from datetime import timezone

from sqlalchemy import exists
from sqlalchemy import func
from sqlalchemy import insert
from sqlalchemy import select
from sqlalchemy import update
from sqlalchemy.orm import Session

from tracker.db.models.user import User

_active = User.deleted_at.is_(None)


def list_users(session: Session) -> list[User]:
    """List active users in id order."""
    stmt = select(User).where(_active).order_by(User.id)
    return list(session.scalars(stmt))


def get_user(session: Session, user_id: int) -> User | None:
    """Fetch an active user by id."""
    stmt = select(User).where(User.id == user_id, _active).limit(1)
    return session.scalars(stmt).one_or_none()


def user_exists(
    session: Session,
    *,
    user_id: int | None = None,
    name: str | None = None,
    email: str | None = None,
    exclude_id: int | None = None,
) -> bool:
    """Return whether an active user matches every given predicate."""
    criteria = [_active]
    if user_id is not None:
        criteria.append(User.id == user_id)
    if name is not None:
        criteria.append(User.name == name)
    if email is not None:
        criteria.append(User.email == email)
    if exclude_id is not None:
        criteria.append(User.id != exclude_id)
    return bool(session.scalar(select(exists().where(*criteria))))


def create_user(session: Session, *, name: str, email: str) -> User:
    """Insert a user and return the stored row."""
    stmt = insert(User).values(name=name, email=email).returning(User)
    return session.scalars(stmt).one()


def update_user(session: Session, user_id: int, *, name: str, email: str) -> User | None:
    """Overwrite name and email of an active user; ``None`` if no row matched."""
    stmt = (
        update(User)
        .where(User.id == user_id, _active)
        .values(name=name, email=email, updated_at=func.now())
        .returning(User)
        .execution_options(synchronize_session=False, populate_existing=True)
    )
    return session.scalars(stmt).one_or_none()


def soft_delete_user(session: Session, user_id: int) -> None:
    """Mark an active user as deleted."""
    now = datetime.now(timezone.utc)
    stmt = (
        update(User)
        .where(User.id == user_id, _active)
        .values(deleted_at=now, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    session.execute(stmt)

"""User API routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Path
from fastapi import Response
from sqlalchemy.orm import Session

from tracker.core.extract import validated_body
from tracker.db.base import get_db_session
from tracker.schemas.user import User
from tracker.schemas.user import UserCreate
from tracker.schemas.user import UserUpdate
from tracker.services.users import create_user_service
from tracker.services.users import get_user_service
from tracker.services.users import list_users_service
from tracker.services.users import remove_user_service
from tracker.services.users import update_user_service

router = APIRouter(prefix="/users", tags=["users"])

UserId = Annotated[int, Path(ge=-(2**63), le=2**63 - 1)]


@router.get("/", response_model=list[User])
def list_users_endpoint(session: Session = Depends(get_db_session)) -> list[User]:
    """List active users."""
    return list_users_service(session)


@router.get("/{user_id}", response_model=User)
def get_user_endpoint(user_id: UserId, session: Session = Depends(get_db_session)) -> User:
    """Get a single user by id."""
    return get_user_service(session, user_id)


@router.post("/", response_model=User)
def create_user_endpoint(
    payload: UserCreate = Depends(validated_body(UserCreate)),
    session: Session = Depends(get_db_session),
) -> User:
    """Create a user."""
    return create_user_service(session, payload)


@router.put("/{user_id}", response_model=User)
def update_user_endpoint(
    user_id: UserId,
    payload: UserUpdate = Depends(validated_body(UserUpdate)),
    session: Session = Depends(get_db_session),
) -> User:
    """Replace a user's name and email."""
    return update_user_service(session, user_id, payload)


@router.delete("/{user_id}", status_code=204)
def delete_user_endpoint(user_id: UserId, session: Session = Depends(get_db_session)) -> Response:
    """Soft-delete a user."""
    remove_user_service(session, user_id)
    return Response(status_code=204)

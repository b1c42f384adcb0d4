"""Model module imports for SQLAlchemy metadata registration."""

from tracker.db.models.user import Base
from tracker.db.models.user import User

__all__ = [
    "Base",
    "User",
]

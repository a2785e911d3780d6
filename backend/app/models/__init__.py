"""SQLAlchemy model package."""

from app.models.user import User
from app.models.program import Program

__all__ = [
    "User",
    "Program",
]

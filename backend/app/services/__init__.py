"""Service layer package."""

from app.services import (
    auth_service,
    program_service,
)

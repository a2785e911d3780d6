"""Programs API router. Validates requests and delegates business rules to the service layer."""

from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.middleware.auth_middleware import require_roles
from app.models.program import Program
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.program import (
    BatchOut,
    ProgramCreate,
    ProgramUpdate,
    ProgramOut,
    ProgramListResponse,
    ProgramPageResponse,
    ProgramResponse,
    ProgramMutationResponse,
    ReorderRequest,
)
from app.services import program_service
from app.utils.permissions import ADMIN

router = APIRouter(prefix="/api/programs", tags=["programs"])


def _program_to_out(program: Program) -> ProgramOut:
    return ProgramOut(
        id=program.program_id,
        branch=program.branch,
        location=program.location,
        batches=[BatchOut.model_validate(batch) for batch in (program.batches or [])],
        features=list(program.features or []),
        color_theme=program.color_theme,
        is_active=bool(program.is_active),
        display_order=int(program.display_order or 0),
        whatsapp_number=program.whatsapp_number,
        created_at=program.created_at,
        updated_at=program.updated_at,
    )


@router.get("", response_model=ProgramListResponse)
def list_programs(db: Session = Depends(get_db)):
    rows = program_service.get_public_programs(db)
    return ProgramListResponse(count=len(rows), data=[_program_to_out(row) for row in rows])


@router.get("/admin", response_model=ProgramPageResponse)
def list_admin_programs(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.ADMIN_PAGE_SIZE, ge=1, le=settings.ADMIN_PAGE_SIZE_MAX),
    search: str = Query("", max_length=100),
    status: Literal["all", "active", "inactive"] = Query("all"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    rows, total = program_service.get_admin_programs(db, page=page, limit=limit, search=search, status=status)
    return ProgramPageResponse(
        count=len(rows),
        total=total,
        total_pages=program_service.total_pages(total, limit),
        current_page=page,
        data=[_program_to_out(row) for row in rows],
    )


@router.patch("/reorder", response_model=MessageResponse)
def reorder_programs(
    data: ReorderRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    program_service.reorder_programs(db, data.program_ids)
    return MessageResponse(message="Programs reordered successfully")


@router.get("/{program_id}", response_model=ProgramResponse)
def get_program(program_id: str, db: Session = Depends(get_db)):
    return ProgramResponse(data=_program_to_out(program_service.get_program(db, program_id)))


@router.post("", response_model=ProgramMutationResponse, status_code=201)
def create_program(
    data: ProgramCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    program = program_service.create_program(db, data)
    return ProgramMutationResponse(message="Program created successfully", data=_program_to_out(program))


@router.put("/{program_id}", response_model=ProgramMutationResponse)
def update_program(
    program_id: str,
    data: ProgramUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    program = program_service.update_program(db, program_id, data)
    return ProgramMutationResponse(message="Program updated successfully", data=_program_to_out(program))


@router.patch("/{program_id}/toggle-status", response_model=ProgramMutationResponse)
def toggle_program_status(
    program_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    program = program_service.toggle_program_status(db, program_id)
    state = "activated" if program.is_active else "deactivated"
    return ProgramMutationResponse(message=f"Program {state} successfully", data=_program_to_out(program))


@router.delete("/{program_id}", response_model=MessageResponse)
def delete_program(
    program_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(ADMIN)),
):
    program_service.delete_program(db, program_id)
    return MessageResponse(message="Program deleted successfully")

"""Program service layer: visibility rules, defaults, ordering and persistence flow."""

import logging
import math
from typing import List, Tuple

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.program import Program, is_valid_program_id
from app.schemas.program import ProgramCreate, ProgramUpdate
from app.utils.color_themes import DEFAULT_COLOR_THEME
from app.utils.errors import DocumentValidationError

logger = logging.getLogger(__name__)


def _ordered(query):
    return query.order_by(Program.display_order.asc(), Program.created_at.desc())


def _ensure_valid_id(program_id) -> str:
    if not is_valid_program_id(program_id):
        raise HTTPException(status_code=400, detail="Invalid program ID")
    return program_id


def _commit(db: Session, program: Program | None = None) -> Program | None:
    try:
        db.commit()
    except DocumentValidationError as exc:
        db.rollback()
        logger.warning("Program rejected by storage validation: %s", exc)
        raise
    if program is not None:
        db.refresh(program)
    return program


def get_public_programs(db: Session) -> List[Program]:
    return _ordered(db.query(Program).filter(Program.is_active == True)).all()  # noqa: E712


def get_admin_programs(
    db: Session,
    page: int = 1,
    limit: int = 10,
    search: str = "",
    status: str = "all",
) -> Tuple[List[Program], int]:
    query = db.query(Program)

    term = (search or "").strip()
    if term:
        query = query.filter(
            or_(
                Program.branch.icontains(term, autoescape=True),
                Program.location.icontains(term, autoescape=True),
            )
        )

    if status == "active":
        query = query.filter(Program.is_active == True)  # noqa: E712
    elif status == "inactive":
        query = query.filter(Program.is_active == False)  # noqa: E712

    total = query.count()
    rows = _ordered(query).offset((page - 1) * limit).limit(limit).all()
    return rows, total


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def get_program(db: Session, program_id: str) -> Program:
    _ensure_valid_id(program_id)
    program = db.query(Program).filter(Program.program_id == program_id).first()
    if not program:
        raise HTTPException(status_code=404, detail="Program not found")
    return program


def create_program(db: Session, data: ProgramCreate) -> Program:
    program = Program(
        branch=data.branch,
        location=data.location,
        batches=[batch.model_dump() for batch in data.batches],
        features=list(data.features),
        color_theme=data.color_theme or DEFAULT_COLOR_THEME,
        whatsapp_number=data.whatsapp_number,
        display_order=data.display_order or 0,
        is_active=True if data.is_active is None else data.is_active,
    )
    db.add(program)
    _commit(db, program)
    logger.info("Program created: %s (%s)", program.program_id, program.branch)
    return program


def update_program(db: Session, program_id: str, data: ProgramUpdate) -> Program:
    program = get_program(db, program_id)
    program.branch = data.branch
    program.location = data.location
    program.batches = [batch.model_dump() for batch in data.batches]
    program.features = list(data.features)
    program.whatsapp_number = data.whatsapp_number
    # Optional fields left out of the payload keep their stored values.
    if data.color_theme is not None:
        program.color_theme = data.color_theme
    if data.display_order is not None:
        program.display_order = data.display_order
    if data.is_active is not None:
        program.is_active = data.is_active
    _commit(db, program)
    logger.info("Program updated: %s", program.program_id)
    return program


def toggle_program_status(db: Session, program_id: str) -> Program:
    program = get_program(db, program_id)
    program.is_active = not program.is_active
    _commit(db, program)
    logger.info("Program %s is_active=%s", program.program_id, program.is_active)
    return program


def delete_program(db: Session, program_id: str) -> None:
    program = get_program(db, program_id)
    db.delete(program)
    db.commit()
    logger.info("Program deleted: %s", program_id)


def reorder_programs(db: Session, program_ids) -> int:
    """Assign display_order = position for every listed program in one transaction.

    Ids without a matching record are skipped. Returns the number of programs updated.
    """
    if not isinstance(program_ids, list):
        raise HTTPException(status_code=400, detail="Program IDs must be an array")
    for program_id in program_ids:
        _ensure_valid_id(program_id)
    if not program_ids:
        return 0

    rows = db.query(Program).filter(Program.program_id.in_(list(dict.fromkeys(program_ids)))).all()
    id_map = {row.program_id: row for row in rows}
    for index, program_id in enumerate(program_ids):
        row = id_map.get(program_id)
        if row is not None:
            row.display_order = index
    _commit(db)
    logger.info("Programs reordered: %d of %d ids matched", len(id_map), len(program_ids))
    return len(id_map)

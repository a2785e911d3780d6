"""Program aggregate: a branch with embedded batches, slots and features."""

import re
import uuid
from datetime import datetime, timezone
from typing import Dict, List

from sqlalchemy import Column, String, Integer, Boolean, DateTime, JSON, Index, event
from app.database import Base
from app.utils.color_themes import COLOR_THEME_VALUES, DEFAULT_COLOR_THEME
from app.utils.errors import DocumentValidationError

PROGRAM_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")
WHATSAPP_PATTERN = re.compile(r"^\+\d{1,4}\d{10}$")

BRANCH_MAX_LENGTH = 100
LOCATION_MAX_LENGTH = 200
FEATURE_MAX_LENGTH = 100


def new_program_id() -> str:
    return uuid.uuid4().hex


def is_valid_program_id(value) -> bool:
    return isinstance(value, str) and PROGRAM_ID_PATTERN.match(value) is not None


def utc_now() -> datetime:
    # Microsecond resolution; SQLite CURRENT_TIMESTAMP only keeps whole seconds.
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Program(Base):
    __tablename__ = "programs"
    __table_args__ = (
        Index("ix_programs_active_order", "is_active", "display_order"),
    )

    program_id = Column(String(32), primary_key=True, default=new_program_id)
    branch = Column(String(BRANCH_MAX_LENGTH), nullable=False)
    location = Column(String(LOCATION_MAX_LENGTH), nullable=False)
    # batches: [{"type", "schedule", "slots": [{"time", "level"}]}]
    batches = Column(JSON, nullable=False, default=list)
    features = Column(JSON, nullable=False, default=list)
    color_theme = Column(String(20), nullable=False, default=DEFAULT_COLOR_THEME)
    is_active = Column(Boolean, nullable=False, default=True)
    display_order = Column(Integer, nullable=False, default=0)
    whatsapp_number = Column(String(20), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def validation_errors(self) -> List[Dict[str, str]]:
        """Check the stored shape of this document and return every violation."""
        errors: List[Dict[str, str]] = []

        def add(field: str, message: str):
            errors.append({"field": field, "message": message})

        def blank(value) -> bool:
            return not isinstance(value, str) or not value.strip()

        if blank(self.branch):
            add("branch", "Branch name is required")
        elif len(self.branch) > BRANCH_MAX_LENGTH:
            add("branch", "Branch name cannot exceed 100 characters")

        if blank(self.location):
            add("location", "Location is required")
        elif len(self.location) > LOCATION_MAX_LENGTH:
            add("location", "Location cannot exceed 200 characters")

        batches = self.batches if isinstance(self.batches, list) else []
        if not batches:
            add("batches", "At least one batch is required")
        for i, batch in enumerate(batches):
            if not isinstance(batch, dict):
                add(f"batches[{i}]", "Batch must be an object")
                continue
            if blank(batch.get("type")):
                add(f"batches[{i}].type", "Batch type is required")
            if blank(batch.get("schedule")):
                add(f"batches[{i}].schedule", "Batch schedule is required")
            slots = batch.get("slots") if isinstance(batch.get("slots"), list) else []
            if not slots:
                add(f"batches[{i}].slots", "At least one slot is required per batch")
            for j, slot in enumerate(slots):
                if not isinstance(slot, dict):
                    add(f"batches[{i}].slots[{j}]", "Slot must be an object")
                    continue
                if blank(slot.get("time")):
                    add(f"batches[{i}].slots[{j}].time", "Slot time is required")
                if blank(slot.get("level")):
                    add(f"batches[{i}].slots[{j}].level", "Slot level is required")

        features = self.features if isinstance(self.features, list) else []
        if not any(not blank(feature) for feature in features):
            add("features", "At least one feature is required")
        for i, feature in enumerate(features):
            if isinstance(feature, str) and len(feature) > FEATURE_MAX_LENGTH:
                add(f"features[{i}]", "Feature cannot exceed 100 characters")

        if self.color_theme is not None and self.color_theme not in COLOR_THEME_VALUES:
            add("colorTheme", f"`{self.color_theme}` is not a valid color theme")

        if blank(self.whatsapp_number):
            add("whatsappNumber", "WhatsApp number is required")
        elif not WHATSAPP_PATTERN.match(self.whatsapp_number):
            add("whatsappNumber", "WhatsApp number must be in format +countrycode followed by 10 digits")

        if self.display_order is not None and int(self.display_order) < 0:
            add("displayOrder", "Display order must be a non-negative integer")

        return errors


@event.listens_for(Program, "before_insert")
@event.listens_for(Program, "before_update")
def _reject_invalid_document(mapper, connection, target: Program):
    errors = target.validation_errors()
    if errors:
        raise DocumentValidationError(errors)

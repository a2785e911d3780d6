"""Program request/response contracts.

Request models double as the validation layer: every rule trims its input and
reports a readable message, and pydantic accumulates all violations across
fields and nested batches/slots before the handler ever runs.
"""

from datetime import datetime
from typing import Annotated, Any, List, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from app.models.program import WHATSAPP_PATTERN
from app.schemas.common import CamelModel
from app.utils.color_themes import COLOR_THEME_VALUES


def _rule(message: str) -> PydanticCustomError:
    return PydanticCustomError("program_rule", message)


# An explicit null reaches the "required" rules instead of a type error.
_blank_if_none = BeforeValidator(lambda value: "" if value is None else value)


def _required_text(message: str):
    def check(value: str) -> str:
        value = value.strip()
        if not value:
            raise _rule(message)
        return value
    return AfterValidator(check)


def _text_length(min_length: int, max_length: int, message: str):
    def check(value: str) -> str:
        value = value.strip()
        if not min_length <= len(value) <= max_length:
            raise _rule(message)
        return value
    return AfterValidator(check)


SlotTime = Annotated[str, _blank_if_none, _required_text("Slot time is required")]
SlotLevel = Annotated[str, _blank_if_none, _required_text("Slot level is required")]
BatchType = Annotated[str, _blank_if_none, _required_text("Batch type is required")]
BatchSchedule = Annotated[str, _blank_if_none, _required_text("Batch schedule is required")]
FeatureText = Annotated[str, _blank_if_none, _required_text("Feature cannot be empty")]
BranchText = Annotated[str, _blank_if_none, _text_length(2, 100, "Branch name must be between 2 and 100 characters")]
LocationText = Annotated[str, _blank_if_none, _text_length(2, 200, "Location must be between 2 and 200 characters")]


class SlotIn(BaseModel):
    model_config = ConfigDict(validate_default=True)

    time: SlotTime = ""
    level: SlotLevel = ""


class BatchIn(BaseModel):
    model_config = ConfigDict(validate_default=True)

    type: BatchType = ""
    schedule: BatchSchedule = ""
    slots: List[SlotIn] = Field(default_factory=list)

    @field_validator("slots")
    @classmethod
    def _at_least_one_slot(cls, value: List[SlotIn]) -> List[SlotIn]:
        if not value:
            raise _rule("At least one slot is required per batch")
        return value


class ProgramCreate(CamelModel):
    model_config = ConfigDict(validate_default=True)

    branch: BranchText = ""
    location: LocationText = ""
    batches: List[BatchIn] = Field(default_factory=list)
    features: List[FeatureText] = Field(default_factory=list)
    color_theme: Optional[str] = None
    whatsapp_number: Annotated[str, _blank_if_none] = ""
    display_order: Optional[int] = None
    is_active: Optional[bool] = None

    @field_validator("batches")
    @classmethod
    def _at_least_one_batch(cls, value: List[BatchIn]) -> List[BatchIn]:
        if not value:
            raise _rule("At least one batch is required")
        return value

    @field_validator("features")
    @classmethod
    def _at_least_one_feature(cls, value: List[str]) -> List[str]:
        if not value:
            raise _rule("At least one feature is required")
        return value

    @field_validator("color_theme")
    @classmethod
    def _known_color_theme(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in COLOR_THEME_VALUES:
            raise _rule("Invalid color theme")
        return value

    @field_validator("whatsapp_number")
    @classmethod
    def _whatsapp_format(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise _rule("WhatsApp number is required")
        if not WHATSAPP_PATTERN.match(value):
            raise _rule("WhatsApp number must be in format +countrycode followed by 10 digits")
        return value

    @field_validator("display_order", mode="before")
    @classmethod
    def _non_negative_order(cls, value: Any) -> Any:
        if value is None:
            return value
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            return value
        raise _rule("Display order must be a non-negative integer")


class ProgramUpdate(ProgramCreate):
    """Full replacement payload; the same rules as create apply."""


class ReorderRequest(CamelModel):
    # Shape is checked by the service so a non-list answers with a plain bad request.
    program_ids: Any = None


class SlotOut(BaseModel):
    time: str
    level: str


class BatchOut(BaseModel):
    type: str
    schedule: str
    slots: List[SlotOut] = []


class ProgramOut(CamelModel):
    id: str
    branch: str
    location: str
    batches: List[BatchOut] = []
    features: List[str] = []
    color_theme: str
    is_active: bool
    display_order: int
    whatsapp_number: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProgramListResponse(CamelModel):
    success: bool = True
    count: int
    data: List[ProgramOut]


class ProgramPageResponse(CamelModel):
    success: bool = True
    count: int
    total: int
    total_pages: int
    current_page: int
    data: List[ProgramOut]


class ProgramResponse(CamelModel):
    success: bool = True
    data: ProgramOut


class ProgramMutationResponse(CamelModel):
    success: bool = True
    message: str
    data: ProgramOut

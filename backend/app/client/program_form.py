"""Admin dashboard state for the programs screen: list filters, paging and the edit form draft."""

import copy
from typing import Any, Dict, List, Optional, Sequence, Union

from app.client.api_client import ApiClient, ApiConnectionError, ApiError, RequestContext
from app.config import settings
from app.models.program import WHATSAPP_PATTERN
from app.utils.color_themes import COLOR_THEMES, DEFAULT_COLOR_THEME, is_color_theme, theme_for

PAGE_SIZE = 9

STATUS_FILTERS = ("all", "active", "inactive")


def default_batches() -> List[Dict[str, Any]]:
    return [
        {
            "type": "Weekday Batch",
            "schedule": "Monday & Thursday",
            "slots": [
                {"time": "8-9 AM", "level": "Beginner Level"},
                {"time": "9-10 AM", "level": "Advanced Level"},
            ],
        },
        {
            "type": "Weekend Batch",
            "schedule": "Saturday & Sunday",
            "slots": [
                {"time": "8-9 AM", "level": "Beginner Level"},
                {"time": "9-10 AM", "level": "Advanced Level"},
            ],
        },
    ]


def empty_draft() -> Dict[str, Any]:
    return {
        "branch": "",
        "location": "",
        "batches": default_batches(),
        "features": [""],
        "colorTheme": DEFAULT_COLOR_THEME,
        "whatsappNumber": settings.DEFAULT_WHATSAPP_NUMBER,
        "displayOrder": 0,
        "isActive": True,
    }


def color_options() -> List[Dict[str, str]]:
    return [{"value": key, "label": theme["label"]} for key, theme in COLOR_THEMES.items()]


def program_card(program: Dict[str, Any]) -> Dict[str, Any]:
    """View model for one program tile in the admin grid."""
    batches = program.get("batches") or []
    number = str(program.get("whatsappNumber") or "")
    return {
        "id": program.get("id"),
        "branch": program.get("branch", ""),
        "location": program.get("location", ""),
        "status": "Active" if program.get("isActive") else "Inactive",
        "toggle_label": "Deactivate" if program.get("isActive") else "Activate",
        "whatsapp_number": number,
        "whatsapp_link": f"https://wa.me/{number.lstrip('+')}" if number else "",
        "batch_count": len(batches),
        "slot_count": sum(len(batch.get("slots") or []) for batch in batches),
        "features": list(program.get("features") or []),
        "colors": theme_for(program.get("colorTheme")),
    }


def _strip(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


class ProgramFormController:
    def __init__(self, api: ApiClient, context: RequestContext):
        self.api = api
        self.context = context

        self.programs: List[Dict[str, Any]] = []
        self.current_page = 1
        self.total_pages = 1
        self.total = 0
        self.search = ""
        self.status_filter = "all"

        self.is_open = False
        self.editing: Optional[Dict[str, Any]] = None
        self.draft: Dict[str, Any] = empty_draft()

        self.errors: List[str] = []
        self.success = ""

    # List -----------------------------------------------------------------

    def refresh(self) -> bool:
        self.errors = []
        try:
            body = self.api.list_admin_programs(
                self.context,
                page=self.current_page,
                limit=PAGE_SIZE,
                search=self.search,
                status=self.status_filter,
            )
        except ApiError as exc:
            self.errors = [self._load_error_message(exc)]
            self.programs = []
            return False
        self.programs = list(body.get("data") or [])
        self.current_page = int(body.get("currentPage") or 1)
        self.total_pages = int(body.get("totalPages") or 1)
        self.total = int(body.get("total") or 0)
        return True

    def cards(self) -> List[Dict[str, Any]]:
        return [program_card(program) for program in self.programs]

    def set_search(self, term: str) -> bool:
        self.search = term or ""
        self.current_page = 1
        return self.refresh()

    def set_status_filter(self, status: str) -> bool:
        if status not in STATUS_FILTERS:
            raise ValueError(f"Unknown status filter: {status}")
        self.status_filter = status
        self.current_page = 1
        return self.refresh()

    def go_to_page(self, page: int) -> bool:
        self.current_page = max(1, min(int(page), max(self.total_pages, 1)))
        return self.refresh()

    def delete(self, program_id: str) -> bool:
        return self._run_action(
            lambda: self.api.delete_program(self.context, program_id),
            "Program deleted successfully!",
            "Failed to delete program",
        )

    def toggle_status(self, program_id: str) -> bool:
        return self._run_action(
            lambda: self.api.toggle_program_status(self.context, program_id),
            "Program status updated!",
            "Failed to update program status",
        )

    def reorder(self, program_ids: List[str]) -> bool:
        return self._run_action(
            lambda: self.api.reorder_programs(self.context, list(program_ids)),
            "Programs reordered!",
            "Failed to reorder programs",
        )

    # Edit surface -----------------------------------------------------------

    def open_create(self):
        self.editing = None
        self.draft = empty_draft()
        self.errors = []
        self.is_open = True

    def open_edit(self, program: Dict[str, Any]):
        self.editing = program
        self.draft = {
            "branch": program.get("branch", ""),
            "location": program.get("location", ""),
            "batches": copy.deepcopy(program.get("batches") or []),
            "features": list(program.get("features") or []) or [""],
            "colorTheme": program.get("colorTheme") or DEFAULT_COLOR_THEME,
            "whatsappNumber": program.get("whatsappNumber", ""),
            "displayOrder": program.get("displayOrder", 0),
            "isActive": program.get("isActive", True),
        }
        self.errors = []
        self.is_open = True

    def close(self):
        self.is_open = False
        self.editing = None
        self.draft = empty_draft()

    def add_feature(self):
        self.draft["features"].append("")

    def remove_feature(self, index: int):
        features = [f for i, f in enumerate(self.draft["features"]) if i != index]
        self.draft["features"] = features or [""]

    def update_feature(self, index: int, value: str):
        self.draft["features"][index] = value

    def add_slot(self, batch_index: int):
        self.draft["batches"][batch_index]["slots"].append({"time": "", "level": ""})

    def remove_slot(self, batch_index: int, slot_index: int):
        batch = self.draft["batches"][batch_index]
        batch["slots"] = [s for i, s in enumerate(batch["slots"]) if i != slot_index]

    def update_batch(self, batch_index: int, field: str, value: str):
        self.draft["batches"][batch_index][field] = value

    def update_slot(self, batch_index: int, slot_index: int, field: str, value: str):
        self.draft["batches"][batch_index]["slots"][slot_index][field] = value

    def set_color(self, value: str):
        if not is_color_theme(value):
            raise ValueError(f"Unknown color theme: {value}")
        self.draft["colorTheme"] = value

    def set_field(self, path: Union[str, Sequence[Union[str, int]]], value: Any):
        """Set any leaf of the draft, e.g. ``set_field("batches.0.slots.1.time", "6-7 PM")``."""
        keys = path.split(".") if isinstance(path, str) else list(path)
        if not keys:
            raise KeyError(path)
        target: Any = self.draft
        for key in keys[:-1]:
            target = target[int(key)] if isinstance(target, list) else target[key]
        last = keys[-1]
        if isinstance(target, list):
            target[int(last)] = value
        elif last in target:
            target[last] = value
        else:
            raise KeyError(path)

    def normalized_payload(self) -> Dict[str, Any]:
        draft = self.draft
        return {
            **draft,
            "branch": _strip(draft.get("branch")),
            "location": _strip(draft.get("location")),
            "whatsappNumber": _strip(draft.get("whatsappNumber")),
            "features": [_strip(f) for f in draft.get("features") or [] if _strip(f)],
            "batches": [
                {
                    "type": _strip(batch.get("type")),
                    "schedule": _strip(batch.get("schedule")),
                    "slots": [
                        {"time": _strip(slot.get("time")), "level": _strip(slot.get("level"))}
                        for slot in batch.get("slots") or []
                    ],
                }
                for batch in draft.get("batches") or []
            ],
        }

    def local_errors(self) -> List[str]:
        payload = self.normalized_payload()
        errors: List[str] = []
        if not payload["branch"]:
            errors.append("Branch name is required")
        if not payload["location"]:
            errors.append("Location is required")
        if not payload["whatsappNumber"]:
            errors.append("WhatsApp number is required")
        elif not WHATSAPP_PATTERN.match(payload["whatsappNumber"]):
            errors.append("WhatsApp number must be in format +countrycode followed by 10 digits")
        if not payload["features"]:
            errors.append("At least one feature is required")
        if not payload["batches"]:
            errors.append("At least one batch is required")
        for i, batch in enumerate(payload["batches"], start=1):
            if not batch["type"]:
                errors.append(f"Batch {i}: Type is required")
            if not batch["schedule"]:
                errors.append(f"Batch {i}: Schedule is required")
            if not batch["slots"]:
                errors.append(f"Batch {i}: At least one slot is required")
            for j, slot in enumerate(batch["slots"], start=1):
                if not slot["time"]:
                    errors.append(f"Batch {i}, Slot {j}: Time is required")
                if not slot["level"]:
                    errors.append(f"Batch {i}, Slot {j}: Level is required")
        return errors

    def submit(self) -> bool:
        """Send the draft. On failure the draft and edit surface stay as they are."""
        self.success = ""
        self.errors = self.local_errors()
        if self.errors:
            return False

        payload = self.normalized_payload()
        try:
            if self.editing:
                self.api.update_program(self.context, self.editing["id"], payload)
                message = "Program updated successfully!"
            else:
                self.api.create_program(self.context, payload)
                message = "Program created successfully!"
        except ApiError as exc:
            self.errors = exc.messages()
            return False

        self.close()
        self.refresh()
        self.success = message
        return True

    # Internals ---------------------------------------------------------------

    def _run_action(self, call, success_message: str, failure_message: str) -> bool:
        self.success = ""
        try:
            call()
        except ApiConnectionError as exc:
            self.errors = [exc.message]
            return False
        except ApiError:
            self.errors = [failure_message]
            return False
        self.refresh()
        self.success = success_message
        return True

    @staticmethod
    def _load_error_message(exc: ApiError) -> str:
        if isinstance(exc, ApiConnectionError):
            return exc.message
        if exc.status_code == 404:
            return "Programs endpoint not found. Please ensure the backend is running."
        if exc.status_code == 401:
            return "Unauthorized. Please log in again."
        if exc.status_code == 500:
            return "Server error. Please try again later."
        return "Unable to load programs. Please try again."

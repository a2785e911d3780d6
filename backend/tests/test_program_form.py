"""Admin program form controller and API client tests."""

import httpx
import pytest

from app.client.api_client import CONNECTION_ERROR_MESSAGE, ApiClient, ApiConnectionError, ApiError, RequestContext
from app.client.program_form import ProgramFormController, color_options, program_card
from app.main import app
from app.models.program import Program
from app.services.auth_service import create_access_token
from fastapi.testclient import TestClient
from tests.conftest import add_program


@pytest.fixture
def admin_context(seed_users):
    return RequestContext(token=create_access_token(seed_users["admin"].user_id))


@pytest.fixture
def controller(admin_context):
    return ProgramFormController(ApiClient(http=TestClient(app)), admin_context)


def _fill_minimal(controller: ProgramFormController, branch: str = "Kamothe Branch"):
    controller.set_field("branch", branch)
    controller.set_field("location", "Associated with Vibe House Studio")
    controller.update_feature(0, "Group coaching")


def test_open_create_uses_default_draft(controller):
    controller.open_create()
    assert controller.is_open is True
    assert controller.editing is None
    assert [b["type"] for b in controller.draft["batches"]] == ["Weekday Batch", "Weekend Batch"]
    assert controller.draft["features"] == [""]
    assert controller.draft["colorTheme"] == "blue"
    assert controller.draft["whatsappNumber"] == "+917039184939"


def test_feature_and_slot_editing(controller):
    controller.open_create()
    controller.add_feature()
    controller.update_feature(1, "Tactics")
    controller.remove_feature(0)
    assert controller.draft["features"] == ["Tactics"]
    controller.remove_feature(0)
    assert controller.draft["features"] == [""]

    controller.add_slot(1)
    controller.update_slot(1, 2, "time", "10-11 AM")
    assert controller.draft["batches"][1]["slots"][2] == {"time": "10-11 AM", "level": ""}
    controller.remove_slot(1, 0)
    assert [s["time"] for s in controller.draft["batches"][1]["slots"]] == ["9-10 AM", "10-11 AM"]

    controller.update_batch(0, "schedule", "Tuesday & Friday")
    controller.set_field("batches.0.slots.1.level", "Intermediate Level")
    assert controller.draft["batches"][0]["schedule"] == "Tuesday & Friday"
    assert controller.draft["batches"][0]["slots"][1]["level"] == "Intermediate Level"

    with pytest.raises(KeyError):
        controller.set_field("batches.0.nickname", "x")


def test_set_color_checks_membership(controller):
    controller.open_create()
    controller.set_color("pink")
    assert controller.draft["colorTheme"] == "pink"
    with pytest.raises(ValueError):
        controller.set_color("teal")
    assert len(color_options()) == 8


def test_normalized_payload_trims_and_drops_empty_features(controller):
    controller.open_create()
    controller.set_field("branch", "  Roadpali Branch ")
    controller.set_field("batches.0.type", " Weekday Batch  ")
    controller.draft["features"] = [" Opening theory ", "   ", ""]

    payload = controller.normalized_payload()
    assert payload["branch"] == "Roadpali Branch"
    assert payload["batches"][0]["type"] == "Weekday Batch"
    assert payload["features"] == ["Opening theory"]


def test_local_errors_block_submit(controller, db):
    controller.open_create()
    controller.set_field("batches.1.slots.0.time", " ")

    assert controller.submit() is False
    assert "Branch name is required" in controller.errors
    assert "At least one feature is required" in controller.errors
    assert "Batch 2, Slot 1: Time is required" in controller.errors
    assert controller.is_open is True
    assert db.query(Program).count() == 0


def test_submit_create_closes_form_and_refreshes(controller, db):
    controller.open_create()
    _fill_minimal(controller)

    assert controller.submit() is True
    assert controller.success == "Program created successfully!"
    assert controller.is_open is False
    assert controller.draft["branch"] == ""
    assert [p["branch"] for p in controller.programs] == ["Kamothe Branch"]
    assert controller.total == 1
    assert db.query(Program).count() == 1


def test_submit_failure_keeps_draft_and_reports_every_server_message(controller):
    controller.open_create()
    _fill_minimal(controller, branch="K")
    controller.set_field("location", "L")

    assert controller.submit() is False
    assert controller.is_open is True
    assert controller.draft["branch"] == "K"
    assert controller.errors == [
        "Branch name must be between 2 and 100 characters",
        "Location must be between 2 and 200 characters",
    ]


def test_submit_edit_updates_existing_program(controller, db):
    add_program(db, "Kalamboli Branch", color_theme="green")
    controller.refresh()

    controller.open_edit(controller.programs[0])
    assert controller.draft["colorTheme"] == "green"
    controller.set_field("branch", "Kalamboli Main Branch")
    assert controller.submit() is True
    assert controller.success == "Program updated successfully!"
    assert [p["branch"] for p in controller.programs] == ["Kalamboli Main Branch"]


def test_list_actions(controller, db):
    first = add_program(db, "Kalamboli Branch", display_order=0)
    second = add_program(db, "Kamothe Branch", display_order=1)
    controller.refresh()

    assert controller.toggle_status(first.program_id) is True
    assert controller.cards()[0]["status"] == "Inactive"

    assert controller.set_status_filter("active") is True
    assert [p["branch"] for p in controller.programs] == ["Kamothe Branch"]

    controller.set_status_filter("all")
    assert controller.reorder([second.program_id, first.program_id]) is True
    assert [p["branch"] for p in controller.programs] == ["Kamothe Branch", "Kalamboli Branch"]

    assert controller.set_search("kalam") is True
    assert controller.total == 1

    assert controller.delete(first.program_id) is True
    assert controller.programs == []
    assert controller.delete(first.program_id) is False
    assert controller.errors == ["Failed to delete program"]


def test_unauthorized_response_calls_handler(seed_users):
    calls = []
    context = RequestContext(token=None, on_unauthorized=lambda: calls.append("logout"))
    controller = ProgramFormController(ApiClient(http=TestClient(app)), context)

    assert controller.refresh() is False
    assert calls == ["logout"]
    assert controller.errors == ["Unauthorized. Please log in again."]


def test_timeout_surfaces_connectivity_error(admin_context):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    http = httpx.Client(base_url="http://academy.test", transport=httpx.MockTransport(handler))
    api = ApiClient(http=http)

    with pytest.raises(ApiConnectionError) as exc_info:
        api.list_public_programs(admin_context)
    assert exc_info.value.message == CONNECTION_ERROR_MESSAGE

    controller = ProgramFormController(api, admin_context)
    controller.open_create()
    _fill_minimal(controller)
    assert controller.submit() is False
    assert controller.errors == [CONNECTION_ERROR_MESSAGE]
    assert controller.is_open is True


def test_api_client_attaches_bearer_per_call():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers.get("Authorization"))
        return httpx.Response(404, json={"success": False, "message": "Program not found"})

    api = ApiClient(http=httpx.Client(base_url="http://academy.test", transport=httpx.MockTransport(handler)))
    with pytest.raises(ApiError) as exc_info:
        api.get_program(RequestContext(token="abc"), "a" * 32)
    with pytest.raises(ApiError):
        api.get_program(RequestContext(), "a" * 32)

    assert seen == ["Bearer abc", None]
    assert exc_info.value.status_code == 404
    assert exc_info.value.messages() == ["Program not found"]


def test_program_card_resolves_theme():
    card = program_card({
        "id": "x",
        "branch": "Online Mode",
        "location": "Learn from Anywhere",
        "isActive": True,
        "colorTheme": "unknown",
        "whatsappNumber": "+917039184939",
        "batches": [{"type": "Weekday", "schedule": "Mon", "slots": [{"time": "8-9", "level": "Beg"}] * 2}],
        "features": ["1-on-1 coaching"],
    })
    assert card["status"] == "Active"
    assert card["slot_count"] == 2
    assert card["whatsapp_link"] == "https://wa.me/917039184939"
    assert card["colors"]["bg"] == "from-blue-500 to-cyan-600"

# tests/test_client.py

from __future__ import annotations

import requests

from medicine_client import MedicineTrackerAPI

from .fakes import FakeSession, make_response


def _api(session: FakeSession, api_key: str | None = "tok") -> MedicineTrackerAPI:
    return MedicineTrackerAPI(base_url="http://medicines.local/", api_key=api_key, session=session)


def test_add_medicine_sends_payload_and_token() -> None:
    session = FakeSession(responses=[make_response(201, {"id": "m-1", "title": "Aspirin"})])

    data, error = _api(session).add_medicine(
        title="Aspirin", description="81mg", assigned_to="nurse-1", expiry_date="2026-12-01"
    )

    assert error is None
    assert data == {"id": "m-1", "title": "Aspirin"}
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "http://medicines.local/api/v1/medicines/"
    assert call["headers"] == {"Authorization": "Bearer tok"}
    assert call["json"]["expiry_date"] == "2026-12-01"


def test_list_queries_pass_parameters() -> None:
    session = FakeSession(responses=[make_response(200, [{"id": "a"}]), make_response(200, [])])
    api = _api(session, api_key=None)

    medicines, error = api.load_more_medicines(2, 5)
    tagged, _ = api.get_medicines_by_tag("urgent")

    assert error is None
    assert medicines == [{"id": "a"}]
    assert tagged == []
    assert session.calls[0]["params"] == {"offset": 2, "limit": 5}
    assert session.calls[1]["url"].endswith("/api/v1/medicines/by-tag")
    assert session.calls[0]["headers"] == {}


def test_server_error_detail_is_returned() -> None:
    session = FakeSession(
        responses=[make_response(403, {"detail": "You are not authorized to access Medicine"})]
    )

    data, error = _api(session).get_medicine("m 1")

    assert data is None
    assert error == {"status_code": 403, "message": "You are not authorized to access Medicine"}
    assert session.calls[0]["url"].endswith("/api/v1/medicines/m%201")


def test_list_error_returns_empty_list() -> None:
    session = FakeSession(responses=[make_response(404, {"detail": "No initial medicines found"})])

    medicines, error = _api(session).get_initial_medicines()

    assert medicines == []
    assert error["status_code"] == 404


def test_reminder_returns_message_text() -> None:
    session = FakeSession(
        responses=[make_response(200, {"id": "m-1", "message": "Medicine is overdue. Please complete it."})]
    )

    message, error = _api(session).send_due_date_reminder("m-1")

    assert error is None
    assert message == "Medicine is overdue. Please complete it."
    assert session.calls[0]["url"].endswith("/medicines/m-1/reminder")


def test_connection_failure_is_reported() -> None:
    session = FakeSession(error=requests.ConnectionError("refused"))

    data, error = _api(session).complete_medicine("m-1")

    assert data is None
    assert error == {"status_code": None, "message": "refused"}

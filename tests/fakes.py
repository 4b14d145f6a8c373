# tests/fakes.py

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import requests

from medicine_tracker_api.app.schemas.medicine import MedicinePayload

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
TOMORROW = "2026-10-19"
YESTERDAY = "2026-10-17"


class FakeClock:
    """Clock that only moves when a test tells it to."""

    def __init__(self, now: datetime = NOW) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **delta: float) -> None:
        self.current = self.current + timedelta(**delta)


def make_payload(**overrides: str) -> MedicinePayload:
    values = {
        "title": "Amoxicillin",
        "description": "500mg capsule, twice daily",
        "assigned_to": "nurse-7",
        "expiry_date": TOMORROW,
    }
    values.update(overrides)
    return MedicinePayload(**values)


def make_response(status_code: int, body: Any = None, url: str = "http://test") -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response._content = b"" if body is None else json.dumps(body).encode("utf-8")
    response.headers["Content-Type"] = "application/json"
    return response


@dataclass
class FakeSession:
    """
    Stand-in for ``requests.Session`` used by client tests.

    - Records every call for assertions
    - Replies with queued responses in order
    """

    responses: list[requests.Response] = field(default_factory=list)
    calls: list[dict[str, Any]] = field(default_factory=list)
    error: Exception | None = None

    def request(self, **kwargs: Any) -> requests.Response:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)

# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from medicine_tracker_api.app.core.security import create_access_token
from medicine_tracker_api.app.main import create_app
from medicine_tracker_api.app.services.medicine_service import MedicineService
from medicine_tracker_api.app.services.medicine_store import MedicineStore

from .fakes import FakeClock

ALICE = "alice-principal"
BOB = "bob-principal"


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(tmp_path: Path) -> MedicineStore:
    """Real SQLite store in a per-test directory."""
    return MedicineStore(str(tmp_path / "medicines.db"))


@pytest.fixture()
def service(store: MedicineStore, clock: FakeClock) -> MedicineService:
    return MedicineService(store, clock, initial_load_size=4)


@pytest.fixture()
def app(store: MedicineStore, clock: FakeClock) -> FastAPI:
    return create_app(store=store, clock=clock)


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


def _auth(principal: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': principal})}"}


@pytest.fixture()
def alice() -> dict[str, str]:
    return _auth(ALICE)


@pytest.fixture()
def bob() -> dict[str, str]:
    return _auth(BOB)

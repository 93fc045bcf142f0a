"""
Pytest configuration and fixtures.

Every test gets its own data directory so the JSON documents written
by one test never leak into another.
"""
import sys
from datetime import timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from course_signup_api.app.core.config import settings  # noqa: E402
from course_signup_api.app.core.db import init_db  # noqa: E402
from course_signup_api.app.core.validation import format_timestamp, utcnow  # noqa: E402
from course_signup_api.app.main import app  # noqa: E402

TERM_CODE = 1251


@pytest.fixture(autouse=True)
def data_dir(tmp_path, monkeypatch):
    """Point the document store at a fresh temporary directory."""
    directory = tmp_path / "data"
    monkeypatch.setattr(settings, "data_dir", str(directory))
    init_db()
    return directory


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def iso_from_now(**delta) -> str:
    return format_timestamp(utcnow() + timedelta(**delta))


@pytest.fixture
def course(client):
    response = client.post("/api/courses", json={"termCode": TERM_CODE, "courseName": "Systems", "section": 1})
    assert response.status_code == 201
    return response.json()["course"]


@pytest.fixture
def open_sheet(client, course):
    """A signup sheet whose window opened an hour ago and closes in an hour."""
    response = client.post(
        "/api/signupsheets",
        json={
            "termCode": TERM_CODE,
            "section": 1,
            "assignmentName": "HW1",
            "notBefore": iso_from_now(hours=-1),
            "notAfter": iso_from_now(hours=1),
        },
    )
    assert response.status_code == 201
    return response.json()["signupSheet"]


@pytest.fixture
def slots(client, open_sheet):
    """Three back-to-back 30 minute slots with room for one member each."""
    response = client.post(
        f"/api/signupsheets/{open_sheet['id']}/slots",
        json={"start": iso_from_now(hours=2), "slotDuration": 30, "numSlots": 3, "maxMembers": 1},
    )
    assert response.status_code == 201
    return response.json()["slots"]

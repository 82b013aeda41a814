"""
Unit tests for the session record.
"""

import dataclasses
from datetime import datetime, timezone

import pytest

from tracking.session import Session


def test_create_stamps_completion_time():
    before = datetime.now(timezone.utc)
    session = Session.create(user_id="u1", duration_minutes=20, distractions=3)

    assert session.id is None
    assert session.completed_at >= before


def test_session_is_immutable():
    session = Session.create(user_id="u1", duration_minutes=20, distractions=3)
    with pytest.raises(dataclasses.FrozenInstanceError):
        session.distractions = 4


@pytest.mark.parametrize("minutes,distractions", [(0, 0), (20, -1)])
def test_invalid_values_rejected(minutes, distractions):
    with pytest.raises(ValueError):
        Session.create(user_id="u1", duration_minutes=minutes, distractions=distractions)


def test_to_record_matches_table_columns():
    moment = datetime(2025, 2, 16, 18, 2, 35, tzinfo=timezone.utc)
    session = Session.create(user_id="u1", duration_minutes=20, distractions=3, completed_at=moment)

    assert session.to_record() == {
        "user_id": "u1",
        "duration_minutes": 20,
        "distractions": 3,
        "completed_at": "2025-02-16T18:02:35+00:00",
    }


def test_from_record_parses_database_row():
    row = {
        "id": "8d7f",
        "user_id": "u1",
        "duration_minutes": 20,
        "distractions": 3,
        "completed_at": "2025-02-16T18:02:35.123456+00:00",
        "created_at": "2025-02-16T18:02:36+00:00",
    }

    session = Session.from_record(row, user_email="ada@example.com")

    assert session.id == "8d7f"
    assert session.duration_minutes == 20
    assert session.completed_at == datetime(2025, 2, 16, 18, 2, 35, 123456, tzinfo=timezone.utc)
    assert session.user_email == "ada@example.com"


def test_from_record_accepts_z_suffix_and_missing_distractions():
    row = {"user_id": "u1", "duration_minutes": 5, "completed_at": "2025-02-16T18:02:35Z"}

    session = Session.from_record(row)

    assert session.distractions == 0
    assert session.completed_at.tzinfo is not None

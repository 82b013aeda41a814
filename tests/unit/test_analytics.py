"""
Unit tests for statistics and display formatting.
"""

from datetime import datetime, timezone

import pytest

from tracking.analytics import (
    compute_global_stats,
    compute_user_stats,
    display_name,
    format_date,
    format_time,
)
from tracking.session import Session


def _session(minutes: int, distractions: int = 0) -> Session:
    return Session.create(user_id="u", duration_minutes=minutes, distractions=distractions)


def test_global_stats_empty():
    assert compute_global_stats([]) == {"total_minutes": 0, "total_sessions": 0, "average_length": 0}


def test_global_average_ignores_short_sessions():
    stats = compute_global_stats([1, 2, 10, 20])

    assert stats["total_minutes"] == 33
    assert stats["total_sessions"] == 4
    assert stats["average_length"] == 15


def test_global_average_rounds_half_up():
    # (5 + 6) / 2 = 5.5 -> 6, and (6 + 7) / 2 = 6.5 -> 7
    assert compute_global_stats([5, 6])["average_length"] == 6
    assert compute_global_stats([6, 7])["average_length"] == 7


def test_global_average_zero_when_only_short_sessions():
    assert compute_global_stats([1, 4])["average_length"] == 0


def test_user_stats_empty():
    assert compute_user_stats([]) == {
        "total_sessions": 0,
        "total_minutes": 0,
        "average_distractions": "0",
    }


def test_user_stats():
    stats = compute_user_stats([_session(20, 3), _session(10, 0), _session(5, 1)])

    assert stats["total_sessions"] == 3
    assert stats["total_minutes"] == 35
    assert stats["average_distractions"] == "1.3"


@pytest.mark.parametrize("seconds,expected", [
    (0, "00:00"),
    (59, "00:59"),
    (1200, "20:00"),
    (1195, "19:55"),
    (10800, "180:00"),
    (-5, "00:00"),
])
def test_format_time(seconds, expected):
    assert format_time(seconds) == expected


def test_format_date_naive():
    assert format_date(datetime(2025, 2, 16, 18, 2)) == "Feb 16, 2025, 6:02 PM"
    assert format_date(datetime(2025, 12, 1, 0, 30)) == "Dec 1, 2025, 12:30 AM"


def test_format_date_aware_is_converted_to_local_time():
    moment = datetime(2025, 2, 16, 18, 2, tzinfo=timezone.utc)
    assert format_date(moment) == format_date(moment.astimezone().replace(tzinfo=None))


def test_display_name():
    assert display_name("ada@example.com") == "ada"
    assert display_name("") == ""

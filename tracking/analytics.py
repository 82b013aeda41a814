"""Analytics for computing meditation statistics from sessions."""

import math
from datetime import datetime
from typing import Any, Dict, Iterable, Sequence

import config
from tracking.session import Session

# Fixed English month names, independent of the system locale
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def compute_global_stats(durations: Iterable[int]) -> Dict[str, Any]:
    """
    Compute the community-wide totals shown on every screen.

    The average only counts sessions of at least
    AVERAGE_MIN_SESSION_MINUTES, so quick test runs don't drag it down.

    Args:
        durations: Duration in minutes of every stored session

    Returns:
        Dictionary with total_minutes, total_sessions and average_length
        (whole minutes, rounded half up)
    """
    durations = [int(d) for d in durations]
    counted = [d for d in durations if d >= config.AVERAGE_MIN_SESSION_MINUTES]

    average = sum(counted) / len(counted) if counted else 0.0

    return {
        "total_minutes": sum(durations),
        "total_sessions": len(durations),
        "average_length": math.floor(average + 0.5),
    }


def compute_user_stats(sessions: Sequence[Session]) -> Dict[str, Any]:
    """
    Compute the signed-in user's own totals.

    Returns:
        Dictionary with total_sessions, total_minutes and
        average_distractions (string with one decimal, "0" when empty)
    """
    total_sessions = len(sessions)
    total_minutes = sum(s.duration_minutes for s in sessions)

    if total_sessions:
        avg = sum(s.distractions for s in sessions) / total_sessions
        average_distractions = f"{avg:.1f}"
    else:
        average_distractions = "0"

    return {
        "total_sessions": total_sessions,
        "total_minutes": total_minutes,
        "average_distractions": average_distractions,
    }


def format_time(seconds: int) -> str:
    """Format a countdown as MM:SS (minutes are not capped at 99)."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def format_date(moment: datetime) -> str:
    """Format a completion time like 'Feb 16, 2025, 6:02 PM' in local time."""
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{_MONTHS[moment.month - 1]} {moment.day}, {moment.year}, {hour}:{moment.minute:02d} {suffix}"


def display_name(email: str) -> str:
    """Short name for the header and history list: the email's local part."""
    return (email or "").split("@")[0]

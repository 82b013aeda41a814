"""Completed meditation session record."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Session:
    """
    One completed meditation interval.

    Built once when the user saves the review and never modified.
    `id` is None until the store has assigned one.
    """

    user_id: str
    duration_minutes: int
    distractions: int
    completed_at: datetime
    id: Optional[str] = None
    user_email: Optional[str] = None

    def __post_init__(self):
        if self.duration_minutes < 1:
            raise ValueError("Session duration must be at least 1 minute")
        if self.distractions < 0:
            raise ValueError("Distraction count cannot be negative")

    @classmethod
    def create(
        cls,
        user_id: str,
        duration_minutes: int,
        distractions: int,
        user_email: Optional[str] = None,
        completed_at: Optional[datetime] = None,
    ) -> "Session":
        """Build a new, not yet persisted, session stamped with the current time."""
        return cls(
            user_id=user_id,
            duration_minutes=duration_minutes,
            distractions=distractions,
            completed_at=completed_at or datetime.now(timezone.utc),
            user_email=user_email,
        )

    def to_record(self) -> Dict[str, Any]:
        """Row for the meditation_sessions table (id is assigned by the database)."""
        return {
            "user_id": self.user_id,
            "duration_minutes": self.duration_minutes,
            "distractions": self.distractions,
            "completed_at": self.completed_at.isoformat(),
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any], user_email: Optional[str] = None) -> "Session":
        """
        Build a session from a database row.

        Args:
            record: Row with user_id, duration_minutes, distractions, completed_at
            user_email: Owner's email, attached for display

        Returns:
            Session instance
        """
        completed_at = record["completed_at"]
        if isinstance(completed_at, str):
            completed_at = datetime.fromisoformat(completed_at.replace("Z", "+00:00"))

        return cls(
            id=str(record["id"]) if record.get("id") is not None else None,
            user_id=str(record["user_id"]),
            duration_minutes=int(record["duration_minutes"]),
            distractions=int(record.get("distractions", 0)),
            completed_at=completed_at,
            user_email=user_email or record.get("user_email"),
        )

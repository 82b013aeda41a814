"""
Test doubles: virtual clock and scheduler, recording audio, in-memory
identity provider and session store.
"""

import heapq
import itertools
from typing import Callable, List, Optional

import config
from sync.base import SyncError, UserIdentity
from tracking.session import Session


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


class FakeScheduler:
    """Virtual-time scheduler: advance() runs due callbacks in order."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self._queue = []
        self._counter = itertools.count()
        self._cancelled = set()

    def call_later(self, delay_seconds, callback):
        handle = next(self._counter)
        heapq.heappush(self._queue, (self.clock.now + delay_seconds, handle, callback))
        return handle

    def cancel(self, handle):
        self._cancelled.add(handle)

    @property
    def pending(self) -> int:
        return sum(1 for _, handle, _ in self._queue if handle not in self._cancelled)

    def advance(self, seconds: float) -> None:
        target = self.clock.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, handle, callback = heapq.heappop(self._queue)
            if handle in self._cancelled:
                continue
            # Overdue callbacks run "late"; the clock never goes backwards
            self.clock.now = max(self.clock.now, due)
            callback()
        self.clock.now = max(self.clock.now, target)


class RecordingOutput:
    """Audio output that records instead of making noise."""

    def __init__(self):
        self.played: List[tuple] = []

    def play(self, data: bytes, audio_format: str) -> bool:
        self.played.append((data, audio_format))
        return True


class DictAssetLoader:
    """Serves assets from a dict of file name -> bytes."""

    def __init__(self, assets: Optional[dict] = None):
        self.assets = assets or {}
        self.requests: List[str] = []

    def fetch_audio_asset(self, name: str):
        self.requests.append(name)
        return self.assets.get(name)


class RecordingCuePlayer:
    """Cue player double that just records requested sequences."""

    def __init__(self):
        self.sequences: List[tuple] = []

    def play_sequence(self, count: int, cue_name: str = config.CUE_INTERVAL) -> None:
        self.sequences.append((count, cue_name))

    def count(self, cue_name: str) -> int:
        return sum(1 for _, name in self.sequences if name == cue_name)


class FakeIdentity:
    """In-memory identity provider."""

    def __init__(self, user: Optional[UserIdentity] = None):
        self.user = user
        self.accounts = {}
        self.sign_in_calls = 0
        self.sign_up_calls = 0
        self.fail_sign_up = False
        self.sign_up_without_session = False
        self._listeners: List[Callable] = []

    def current_user(self):
        return self.user

    def sign_in(self, email, password):
        self.sign_in_calls += 1
        if self.accounts.get(email) == password:
            self._set_user(UserIdentity(id=f"id-{email}", email=email))
            return True
        return False

    def sign_up(self, email, password, display_name=""):
        self.sign_up_calls += 1
        if self.fail_sign_up:
            return False
        self.accounts[email] = password
        if self.sign_up_without_session:
            return True
        self._set_user(UserIdentity(id=f"id-{email}", email=email))
        return True

    def sign_out(self):
        self._set_user(None)

    def subscribe(self, callback):
        self._listeners.append(callback)
        return lambda: self._listeners.remove(callback)

    def _set_user(self, user):
        self.user = user
        for callback in list(self._listeners):
            callback(user)


class FakeStore:
    """In-memory session store."""

    def __init__(self):
        self.rows: List[Session] = []
        self.fail_inserts = False
        self.fail_reads = False
        self.insert_calls = 0

    def insert_session(self, session: Session) -> Session:
        self.insert_calls += 1
        if self.fail_inserts:
            raise SyncError("database unavailable")
        saved = Session(
            id=f"row-{len(self.rows) + 1}",
            user_id=session.user_id,
            duration_minutes=session.duration_minutes,
            distractions=session.distractions,
            completed_at=session.completed_at,
            user_email=session.user_email,
        )
        self.rows.append(saved)
        return saved

    def list_sessions(self, user_id, user_email=None):
        if self.fail_reads:
            raise SyncError("database unavailable")
        owned = [s for s in self.rows if s.user_id == user_id]
        return sorted(owned, key=lambda s: s.completed_at, reverse=True)

    def list_all_durations(self):
        if self.fail_reads:
            raise SyncError("database unavailable")
        return [s.duration_minutes for s in self.rows]

    def subscribe(self, callback):
        return lambda: None

"""
SessionController - start, stop, review and save meditation sessions.

Owns the countdown engine and the review state, and talks to the
identity provider and session store. Has no UI dependencies; the GUI
calls controller methods and receives updates via callbacks.

Callbacks:
    on_tick(remaining_seconds: int)
    on_review(duration_minutes: int, completed: bool)
    on_idle()
    on_sessions_changed(sessions: list)
    on_error(error_type: str, message: str)
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from sync.base import IdentityProviderProtocol, SessionStoreProtocol, UserIdentity
from tracking.analytics import compute_global_stats, compute_user_stats
from tracking.countdown import CountdownEngine, TimerStatus
from tracking.session import Session

logger = logging.getLogger(__name__)

NOT_LOGGED_IN_MESSAGE = "Please log in first to track your sessions."
LOGIN_FAILED_MESSAGE = "Error logging in. Please try again."


@dataclass
class ReviewState:
    """Post-stop details the user confirms before saving."""

    duration_minutes: int
    completed: bool
    distractions: int = 0

    def increment(self) -> int:
        self.distractions += 1
        return self.distractions

    def decrement(self) -> int:
        self.distractions = max(0, self.distractions - 1)
        return self.distractions


class SessionController:
    """
    Session lifecycle: idle -> running -> review -> idle.

    Handles:
    - Authentication precondition for starting
    - Manual stop and natural completion (both enter review)
    - Distraction counting during review
    - Save (persist + prepend to history) or discard
    - Per-user history and global stats
    """

    def __init__(
        self,
        engine: CountdownEngine,
        identity: IdentityProviderProtocol,
        store: SessionStoreProtocol,
    ) -> None:
        self.engine = engine
        self.identity = identity
        self.store = store

        self.review: Optional[ReviewState] = None
        self.sessions: List[Session] = []
        self.global_stats: Dict[str, Any] = compute_global_stats([])

        # ---- Callbacks (set by the GUI) ----
        self.on_tick: Optional[Callable[[int], None]] = None
        self.on_review: Optional[Callable[[int, bool], None]] = None
        self.on_idle: Optional[Callable[[], None]] = None
        self.on_sessions_changed: Optional[Callable[[List[Session]], None]] = None
        self.on_error: Optional[Callable[[str, str], None]] = None

        self.engine.on_tick = self._handle_tick
        self.engine.on_stopped = self._enter_review

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------

    def set_duration(self, minutes: int) -> bool:
        """Change the session length. Only allowed while idle."""
        return self.engine.set_duration(minutes)

    def start_session(self) -> Dict:
        """
        Start a new meditation session.

        Returns:
            {"success": bool, "error": str | None, "error_type": str | None}
            error_type values: "not_authenticated", "already_running",
                "review_pending"
        """
        status = self.engine.state.status
        if status == TimerStatus.RUNNING:
            return {"success": False, "error": "Session already running", "error_type": "already_running"}
        if status == TimerStatus.REVIEW:
            return {
                "success": False,
                "error": "Save or discard the previous session first.",
                "error_type": "review_pending",
            }

        if self.identity.current_user() is None:
            logger.info("Start rejected - no user signed in")
            return {"success": False, "error": NOT_LOGGED_IN_MESSAGE, "error_type": "not_authenticated"}

        self.review = None
        self.engine.start()
        logger.info("Session started")
        return {"success": True, "error": None, "error_type": None}

    def stop_session(self) -> Dict:
        """
        Stop the running session and enter review.

        Returns:
            {"success": bool, "duration_minutes": int | None}
        """
        duration = self.engine.stop()
        if duration is None:
            return {"success": False, "duration_minutes": None}
        return {"success": True, "duration_minutes": duration}

    # ------------------------------------------------------------------
    # Review
    # ------------------------------------------------------------------

    def increment_distractions(self) -> int:
        if self.review is None:
            return 0
        return self.review.increment()

    def decrement_distractions(self) -> int:
        if self.review is None:
            return 0
        return self.review.decrement()

    def commit_session(self) -> Optional[Session]:
        """
        Save the reviewed session.

        The timer returns to idle whether or not the store accepts the
        record. A failed insert is logged and reported via on_error; it
        is not retried.

        Returns:
            The stored session, or None if nothing was saved
        """
        review = self.review
        if review is None:
            logger.warning("Commit requested with no session under review")
            return None

        user = self.identity.current_user()
        self._return_to_idle()

        if user is None:
            logger.error("Error saving session: no user signed in")
            self._notify_error("persistence_error", NOT_LOGGED_IN_MESSAGE)
            return None

        record = Session.create(
            user_id=user.id,
            duration_minutes=review.duration_minutes,
            distractions=review.distractions,
            user_email=user.email,
        )

        try:
            saved = self.store.insert_session(record)
        except Exception as e:
            logger.error(f"Error saving session: {e}")
            self._notify_error("persistence_error", "Your session could not be saved.")
            return None

        self.sessions.insert(0, saved)
        self._notify_sessions_changed()
        return saved

    def discard_session(self) -> None:
        """Drop the reviewed session without saving it."""
        if self.review is None:
            return
        logger.info("Session discarded")
        self._return_to_idle()

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    def log_in(self, email: str, password: str) -> Dict:
        """
        Sign in, registering the account first if it doesn't exist yet.

        Returns:
            {"success": bool, "error": str | None, "error_type": str | None}
        """
        email = email.strip().lower()
        if not email or not password:
            return {"success": False, "error": LOGIN_FAILED_MESSAGE, "error_type": "login_failed"}

        signed_in = (
            self.identity.sign_in(email, password)
            or self.identity.sign_up(email, password, display_name=email.split("@")[0])
        )

        # A provider may accept the credentials without starting a session
        if signed_in and self.identity.current_user() is None:
            logger.warning(f"Login for {email} returned no active session")
            signed_in = False

        if signed_in:
            return {"success": True, "error": None, "error_type": None}
        return {"success": False, "error": LOGIN_FAILED_MESSAGE, "error_type": "login_failed"}

    def log_out(self) -> None:
        """Sign out, ending any running session and dropping unsaved review."""
        if self.engine.state.is_running:
            self.stop_session()
        if self.review is not None:
            self._return_to_idle()

        self.identity.sign_out()
        self.handle_auth_change(None)

    def handle_auth_change(self, user: Optional[UserIdentity]) -> None:
        """React to sign-in / sign-out from the identity provider."""
        if user is None:
            self.sessions = []
            self._notify_sessions_changed()
        else:
            self.load_sessions(user)

    # ------------------------------------------------------------------
    # History & stats
    # ------------------------------------------------------------------

    def load_sessions(self, user: Optional[UserIdentity] = None) -> List[Session]:
        """Fetch the signed-in user's sessions, most recent first."""
        user = user or self.identity.current_user()
        if user is None:
            return self.sessions

        try:
            self.sessions = self.store.list_sessions(user.id, user_email=user.email)
        except Exception as e:
            logger.error(f"Error fetching sessions: {e}")
            return self.sessions

        self._notify_sessions_changed()
        return self.sessions

    def refresh_global_stats(self) -> Dict[str, Any]:
        """Recompute global stats from the store; keeps the last values on failure."""
        try:
            durations = self.store.list_all_durations()
        except Exception as e:
            logger.warning(f"Could not refresh global stats: {e}")
            return self.global_stats

        self.global_stats = compute_global_stats(durations)
        return self.global_stats

    def get_user_stats(self) -> Dict[str, Any]:
        return compute_user_stats(self.sessions)

    def get_status(self) -> Dict:
        """
        Snapshot for the GUI.

        Returns:
            dict with keys: state, duration_minutes, remaining_seconds,
            is_running, review.
        """
        state = self.engine.state
        review = None
        if self.review is not None:
            review = {
                "duration_minutes": self.review.duration_minutes,
                "distractions": self.review.distractions,
                "completed": self.review.completed,
            }
        return {
            "state": state.status.value,
            "duration_minutes": state.duration_minutes,
            "remaining_seconds": max(0, state.remaining_seconds),
            "is_running": state.is_running,
            "review": review,
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _enter_review(self, duration_minutes: int, completed: bool) -> None:
        self.review = ReviewState(duration_minutes=duration_minutes, completed=completed)
        self._emit(self.on_review, duration_minutes, completed)

    def _handle_tick(self, remaining_seconds: int) -> None:
        self._emit(self.on_tick, remaining_seconds)

    def _return_to_idle(self) -> None:
        self.review = None
        self.engine.reset()
        self._emit(self.on_idle)

    def _notify_sessions_changed(self) -> None:
        self._emit(self.on_sessions_changed, list(self.sessions))

    def _notify_error(self, error_type: str, message: str) -> None:
        self._emit(self.on_error, error_type, message)

    def _emit(self, callback, *args) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            logger.debug(f"Controller callback error: {e}")

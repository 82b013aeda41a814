"""
Supabase-backed identity provider and session store.

Sessions live in the `meditation_sessions` table:
    id uuid, user_id uuid, duration_minutes int, distractions int,
    completed_at timestamptz, created_at timestamptz
Row-level security limits reads and inserts to the owning user.
"""

import logging
from typing import Any, Callable, List, Optional

from supabase import Client, create_client

import config
from sync.base import SyncError, UserIdentity
from tracking.session import Session

logger = logging.getLogger(__name__)

# Process-wide client, created on first use
_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get the shared Supabase client, creating it lazily.

    Raises:
        SyncError: If SUPABASE_URL or SUPABASE_ANON_KEY is not configured
    """
    global _client
    if _client is None:
        if not config.SUPABASE_URL or not config.SUPABASE_ANON_KEY:
            raise SyncError("Supabase is not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY in your .env file.")
        _client = create_client(config.SUPABASE_URL, config.SUPABASE_ANON_KEY)
        logger.info("Supabase client created")
    return _client


class _Listeners:
    """Small callback registry shared by the provider and the store."""

    def __init__(self):
        self._callbacks: List[Callable] = []

    def add(self, callback: Callable) -> Callable[[], None]:
        self._callbacks.append(callback)

        def remove():
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return remove

    def notify(self, *args) -> None:
        for callback in list(self._callbacks):
            try:
                callback(*args)
            except Exception as e:
                logger.debug(f"Listener error: {e}")


def _to_identity(user: Any) -> Optional[UserIdentity]:
    if user is None:
        return None
    return UserIdentity(id=str(user.id), email=user.email or "")


class SupabaseIdentityProvider:
    """Email/password authentication through Supabase Auth."""

    def __init__(self, client: Optional[Client] = None):
        self.client = client or get_supabase_client()
        self._listeners = _Listeners()
        self._subscription = None

    def current_user(self) -> Optional[UserIdentity]:
        try:
            response = self.client.auth.get_user()
        except Exception as e:
            logger.warning(f"Could not fetch current user: {e}")
            return None

        if not response:
            return None
        return _to_identity(response.user)

    def sign_in(self, email: str, password: str) -> bool:
        try:
            self.client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            logger.info(f"Sign-in failed for {email}: {e}")
            return False
        logger.info(f"Signed in as {email}")
        return True

    def sign_up(self, email: str, password: str, display_name: str = "") -> bool:
        try:
            response = self.client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"name": display_name or email.split("@")[0]}},
            })
        except Exception as e:
            logger.warning(f"Sign-up failed for {email}: {e}")
            return False

        # Projects with email confirmation create the user but no session
        if response is None or response.session is None:
            logger.warning(f"Signed up {email} but no session was returned (email confirmation pending?)")
            return False
        logger.info(f"Signed up as {email}")
        return True

    def sign_out(self) -> None:
        try:
            self.client.auth.sign_out()
        except Exception as e:
            logger.warning(f"Sign-out failed: {e}")

    def subscribe(self, callback: Callable[[Optional[UserIdentity]], None]) -> Callable[[], None]:
        if self._subscription is None:
            self._subscription = self.client.auth.on_auth_state_change(self._on_auth_state_change)
        return self._listeners.add(callback)

    def _on_auth_state_change(self, event, session) -> None:
        user = _to_identity(session.user) if session is not None else None
        logger.debug(f"Auth state change: {event}")
        self._listeners.notify(user)


class SupabaseSessionStore:
    """Meditation session rows in Supabase Postgres."""

    def __init__(self, client: Optional[Client] = None, table: str = config.SESSIONS_TABLE):
        self.client = client or get_supabase_client()
        self.table = table
        self._listeners = _Listeners()

    def insert_session(self, session: Session) -> Session:
        response = self.client.table(self.table).insert(session.to_record()).execute()
        if not response.data:
            raise SyncError("Session insert returned no rows")

        saved = Session.from_record(response.data[0], user_email=session.user_email)
        logger.info(f"Session saved ({saved.duration_minutes} min, {saved.distractions} distractions)")
        self._listeners.notify()
        return saved

    def list_sessions(self, user_id: str, user_email: Optional[str] = None) -> List[Session]:
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("user_id", user_id)
            .order("completed_at", desc=True)
            .execute()
        )
        return [Session.from_record(row, user_email=user_email) for row in response.data or []]

    def list_all_durations(self) -> List[int]:
        response = self.client.table(self.table).select("duration_minutes").execute()
        return [int(row["duration_minutes"]) for row in response.data or []]

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        return self._listeners.add(callback)

"""Interfaces for the external identity provider and session store."""

from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol

from tracking.session import Session


class SyncError(Exception):
    """Raised when the remote store rejects or loses a request."""


@dataclass(frozen=True)
class UserIdentity:
    """The signed-in user, as far as the timer cares."""

    id: str
    email: str = ""

    @property
    def display_name(self) -> str:
        return self.email.split("@")[0]


class IdentityProviderProtocol(Protocol):
    """
    Protocol for the authentication service.

    The timer only asks two questions of it: is anyone signed in, and
    who. Sign-in mechanics stay on the provider's side.
    """

    def current_user(self) -> Optional[UserIdentity]:
        """Return the signed-in user, or None."""
        ...

    def sign_in(self, email: str, password: str) -> bool:
        """
        Sign in with existing credentials.

        Returns:
            True on success, False if the provider rejected the credentials
        """
        ...

    def sign_up(self, email: str, password: str, display_name: str = "") -> bool:
        """
        Register a new account and sign in with it.

        Returns:
            True if the user is signed in afterwards, False otherwise
            (including accounts still awaiting email confirmation)
        """
        ...

    def sign_out(self) -> None:
        """End the current session with the provider."""
        ...

    def subscribe(self, callback: Callable[[Optional[UserIdentity]], None]) -> Callable[[], None]:
        """
        Register for sign-in / sign-out notifications.

        Returns:
            Function that removes the subscription
        """
        ...


class SessionStoreProtocol(Protocol):
    """Protocol for durable session storage."""

    def insert_session(self, session: Session) -> Session:
        """
        Persist a new session.

        Returns:
            The stored session, with its database id

        Raises:
            SyncError or a client exception if the insert failed
        """
        ...

    def list_sessions(self, user_id: str, user_email: Optional[str] = None) -> List[Session]:
        """Return the user's sessions, most recent first, tagged with `user_email`."""
        ...

    def list_all_durations(self) -> List[int]:
        """Return the duration in minutes of every stored session."""
        ...

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Register for change notifications.

        Returns:
            Function that removes the subscription
        """
        ...

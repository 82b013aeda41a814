"""
External collaborators: authentication and durable session storage.
"""

from sync.base import (
    IdentityProviderProtocol,
    SessionStoreProtocol,
    SyncError,
    UserIdentity,
)

__all__ = [
    "IdentityProviderProtocol",
    "SessionStoreProtocol",
    "SyncError",
    "UserIdentity",
]

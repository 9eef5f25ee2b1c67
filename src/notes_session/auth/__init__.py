"""
Registration, login and session persistence.

    from notes_session.auth import SessionAuthManager, User

    manager = SessionAuthManager(store)
    result = await manager.login("alice@example.com", "pw1")
    if isinstance(result, User):
        ...
"""

from notes_session.auth.credentials import CredentialPolicy, PlainTextCredentials, SaltedHashCredentials
from notes_session.auth.data_models.user import AuthResult, Rejected, RejectionReason, User
from notes_session.auth.manager import SESSION_KEY, USERS_KEY, SessionAuthManager

__all__ = [
    "SESSION_KEY",
    "USERS_KEY",
    "AuthResult",
    "CredentialPolicy",
    "PlainTextCredentials",
    "Rejected",
    "RejectionReason",
    "SaltedHashCredentials",
    "SessionAuthManager",
    "User",
]

"""
User record and authentication outcome models.

'User' is the record persisted in the user collection and, as a copy, in the
session pointer. 'password' holds whatever the active 'CredentialPolicy'
produced; for the default plain-text policy that is the submitted password.

Authentication decisions are values, not exceptions: 'register' and 'login'
return either a 'User' or a 'Rejected' carrying a 'RejectionReason'.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class User(BaseModel):
    """A registered user. Records are immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    username: str
    email: str
    password: str


class RejectionReason(StrEnum):
    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_CREDENTIALS = "invalid_credentials"


class Rejected(BaseModel):
    """A register or login attempt that was refused without mutating any state."""

    model_config = ConfigDict(frozen=True)

    reason: RejectionReason


AuthResult = User | Rejected

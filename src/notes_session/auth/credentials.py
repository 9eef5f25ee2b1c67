"""
Credential policies.

A 'CredentialPolicy' decides how a submitted password is written into a
'User' record and how a login attempt is checked against it. The register and
login contract of 'SessionAuthManager' is identical under every policy.

'PlainTextCredentials' keeps the password verbatim, matching records written
by earlier versions of the app. 'SaltedHashCredentials' stores a salted
PBKDF2-SHA256 digest instead.
"""

import hashlib
import hmac
import os
from abc import ABC, abstractmethod

PBKDF2_SCHEME = "pbkdf2_sha256"
DEFAULT_PBKDF2_ITERATIONS = 200_000


class CredentialPolicy(ABC):
    """Abstract strategy for storing and verifying passwords."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier used in configuration (e.g. 'plain', 'pbkdf2')."""

    @abstractmethod
    def encode(self, password: str) -> str:
        """Return the value to store in 'User.password' for a new registration."""

    @abstractmethod
    def verify(self, password: str, stored: str) -> bool:
        """Return True if 'password' matches the stored value."""


class PlainTextCredentials(CredentialPolicy):
    @property
    def name(self) -> str:
        return "plain"

    def encode(self, password: str) -> str:
        return password

    def verify(self, password: str, stored: str) -> bool:
        return hmac.compare_digest(password.encode("utf-8"), stored.encode("utf-8"))


class SaltedHashCredentials(CredentialPolicy):
    """
    PBKDF2-SHA256 with a random 16-byte salt per user.

    Stored format: 'pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>'. The
    iteration count is read back from the stored value, so raising
    'iterations' later does not invalidate existing records.
    """

    def __init__(self, iterations: int = DEFAULT_PBKDF2_ITERATIONS) -> None:
        if iterations <= 0:
            raise ValueError("iterations must be positive")
        self.iterations = iterations

    @property
    def name(self) -> str:
        return "pbkdf2"

    def encode(self, password: str) -> str:
        salt = os.urandom(16)
        digest = self._digest(password, salt, self.iterations)
        return f"{PBKDF2_SCHEME}${self.iterations}${salt.hex()}${digest.hex()}"

    def verify(self, password: str, stored: str) -> bool:
        parts = stored.split("$")
        if len(parts) != 4 or parts[0] != PBKDF2_SCHEME:
            return False
        try:
            iterations = int(parts[1])
            salt = bytes.fromhex(parts[2])
            expected = bytes.fromhex(parts[3])
        except ValueError:
            return False
        if iterations <= 0:
            return False
        return hmac.compare_digest(self._digest(password, salt, iterations), expected)

    @staticmethod
    def _digest(password: str, salt: bytes, iterations: int) -> bytes:
        return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)

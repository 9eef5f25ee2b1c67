"""
Session/auth manager (Facade over the key-value store).

'SessionAuthManager' is the only writer of the two session keys:

    'users'         - JSON array of every registered 'User', in registration order.
    'loggedInUser'  - JSON object of the user currently logged in, or absent.

Error policy differs per operation. 'register' and 'logout' let 'StorageError'
propagate, because a lost registration or a session that silently survives
logout must be visible to the caller. 'login' and 'restore_session' absorb
storage failures so they always resolve to a definite answer: a failed login
is a 'Rejected', a failed restore is no session.
"""

from collections.abc import Callable
from typing import Any

from loguru import logger
from pydantic import ValidationError

from notes_session.auth.credentials import CredentialPolicy, PlainTextCredentials
from notes_session.auth.data_models.user import AuthResult, Rejected, RejectionReason, User
from notes_session.exceptions import StorageError
from notes_session.storage.base import KeyValueStore
from notes_session.utils.database import generate_uid

USERS_KEY = "users"
SESSION_KEY = "loggedInUser"


class SessionAuthManager:
    def __init__(
        self,
        store: KeyValueStore,
        credentials: CredentialPolicy | None = None,
        id_factory: Callable[[], str] = generate_uid,
    ):
        self.store = store
        self.credentials = credentials or PlainTextCredentials()
        self.id_factory = id_factory

    async def _load_records(self) -> list[Any]:
        """Return the stored collection as raw JSON records, including ones that do not validate."""
        raw = await self.store.get(USERS_KEY)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning(f"Ignoring {USERS_KEY!r}: expected a list, got {type(raw).__name__}")
            return []
        return raw

    async def list_users(self) -> list[User]:
        """Return the valid records of the user collection; an absent or unreadable collection is empty."""
        return self._validate(await self._load_records())

    @staticmethod
    def _validate(records: list[Any]) -> list[User]:
        users: list[User] = []
        for index, record in enumerate(records):
            try:
                users.append(User.model_validate(record))
            except ValidationError as exc:
                logger.warning(f"Skipping malformed user record #{index}: {exc.error_count()} error(s)")
        return users

    async def register(self, username: str, email: str, password: str) -> AuthResult:
        """
        Create a user and make it the logged-in user.

        The collection is written before the session pointer. If the second
        write fails the user exists but is not logged in; a later 'login'
        recovers from that.

        Returns:
            The new 'User', or 'Rejected(DUPLICATE_EMAIL)' if the email is taken.

        Raises:
            StorageError: If either write fails.
        """
        records = await self._load_records()
        if any(isinstance(r, dict) and r.get("email") == email for r in records):
            logger.info(f"Registration rejected, email already registered: {email!r}")
            return Rejected(reason=RejectionReason.DUPLICATE_EMAIL)

        user = User(
            id=self.id_factory(),
            username=username,
            email=email,
            password=self.credentials.encode(password),
        )
        try:
            await self.store.put(USERS_KEY, [*records, self._dump(user)])
            await self.store.put(SESSION_KEY, self._dump(user))
        except StorageError as exc:
            logger.error(f"Registration of {email!r} failed: {exc}")
            raise

        logger.info(f"Registered user {user.id} ({email!r})")
        return user

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Check credentials and persist the matching user as the session pointer.

        Matching is exact (case-sensitive, no trimming) on email and delegated
        to the credential policy for the password. The first match in
        registration order wins.
        """
        try:
            users = await self.list_users()
        except Exception as exc:
            logger.error(f"Login for {email!r} could not read the user collection: {exc}")
            return Rejected(reason=RejectionReason.INVALID_CREDENTIALS)
        user = next(
            (u for u in users if u.email == email and self.credentials.verify(password, u.password)),
            None,
        )
        if user is None:
            logger.info(f"Login rejected for {email!r}")
            return Rejected(reason=RejectionReason.INVALID_CREDENTIALS)

        try:
            await self.store.put(SESSION_KEY, self._dump(user))
        except StorageError as exc:
            logger.error(f"Login for {email!r} could not persist the session: {exc}")
            return Rejected(reason=RejectionReason.INVALID_CREDENTIALS)

        logger.info(f"User {user.id} logged in")
        return user

    async def logout(self) -> None:
        """Remove the session pointer. Succeeds when no session is active."""
        try:
            await self.store.remove(SESSION_KEY)
        except StorageError as exc:
            logger.error(f"Logout failed: {exc}")
            raise
        logger.info("Session cleared")

    async def restore_session(self) -> User | None:
        """Return the persisted session user verbatim, without checking it against the collection."""
        try:
            raw: Any = await self.store.get(SESSION_KEY)
        except Exception as exc:
            logger.error(f"Failed to read the session pointer, treating it as absent: {exc}")
            return None
        if raw is None:
            return None
        try:
            return User.model_validate(raw)
        except ValidationError as exc:
            logger.warning(f"Ignoring malformed session pointer: {exc.error_count()} error(s)")
            return None

    @staticmethod
    def _dump(user: User) -> dict[str, Any]:
        return user.model_dump(mode="json")

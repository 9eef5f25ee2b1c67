"""
Session-gated flow controller.

'SessionFlowController' owns the in-memory session: which user is logged in,
if any, and whether the startup restore is still running. The UI never reads
global state; it receives a 'SessionContext' snapshot, either from
'controller.session' or through a listener registered with 'subscribe'.

States and the flow exposed in each:

    RESTORING        -> None (render nothing until 'start' completes)
    UNAUTHENTICATED  -> FlowKind.AUTH      (login / register screens)
    AUTHENTICATED    -> FlowKind.PROTECTED (notes screens)

Logout is optimistic: the in-memory user is cleared even when removing the
persisted session pointer fails, so the UI always returns to the auth flow.
The storage error is still re-raised afterwards for the caller to display.
"""

from collections.abc import Callable
from enum import StrEnum

from loguru import logger
from pydantic import BaseModel, ConfigDict

from notes_session.auth.data_models.user import AuthResult, User
from notes_session.auth.manager import SessionAuthManager
from notes_session.exceptions import FlowStateError


class FlowState(StrEnum):
    RESTORING = "restoring"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class FlowKind(StrEnum):
    """The group of screens offered to the user."""

    AUTH = "auth"
    PROTECTED = "protected"


class SessionContext(BaseModel):
    """Immutable snapshot of the in-memory session, handed to UI consumers."""

    model_config = ConfigDict(frozen=True)

    current_user: User | None = None
    restoring: bool = True

    @property
    def state(self) -> FlowState:
        if self.restoring:
            return FlowState.RESTORING
        if self.current_user is None:
            return FlowState.UNAUTHENTICATED
        return FlowState.AUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        return self.state is FlowState.AUTHENTICATED


SessionListener = Callable[[SessionContext], None]


class SessionFlowController:
    def __init__(self, manager: SessionAuthManager):
        self.manager = manager
        self._session = SessionContext()
        self._listeners: list[SessionListener] = []
        self._started = False

    @property
    def session(self) -> SessionContext:
        return self._session

    @property
    def state(self) -> FlowState:
        return self._session.state

    @property
    def current_user(self) -> User | None:
        return self._session.current_user

    @property
    def current_flow(self) -> FlowKind | None:
        match self.state:
            case FlowState.RESTORING:
                return None
            case FlowState.UNAUTHENTICATED:
                return FlowKind.AUTH
            case FlowState.AUTHENTICATED:
                return FlowKind.PROTECTED

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Call 'listener' with the new context after every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def start(self) -> SessionContext:
        """
        Restore the persisted session and leave the RESTORING state.

        Never raises: a failing restore is logged and treated as no session.
        Only the first call performs the restore; later calls return the
        current context.
        """
        if self._started:
            return self._session
        self._started = True

        try:
            user = await self.manager.restore_session()
        except Exception as exc:
            logger.error(f"Failed to restore session, starting unauthenticated: {exc}")
            user = None

        if user is None:
            logger.info("No session to restore")
        else:
            logger.info(f"Restored session for user {user.id}")
        self._transition(SessionContext(current_user=user, restoring=False))
        return self._session

    async def register(self, username: str, email: str, password: str) -> AuthResult:
        result = await self.manager.register(username, email, password)
        if isinstance(result, User):
            self.on_login(result)
        return result

    async def login(self, email: str, password: str) -> AuthResult:
        result = await self.manager.login(email, password)
        if isinstance(result, User):
            self.on_login(result)
        return result

    def on_login(self, user: User) -> None:
        """Switch to the protected flow for a user that was authenticated by the manager."""
        self._transition(SessionContext(current_user=user, restoring=False))

    async def logout(self) -> None:
        try:
            await self.manager.logout()
        finally:
            self._transition(SessionContext(current_user=None, restoring=False))

    def auth_flow(self) -> "AuthFlow":
        if self.state is not FlowState.UNAUTHENTICATED:
            raise FlowStateError(f"Auth flow is not available while {self.state}")
        return AuthFlow(self)

    def protected_flow(self) -> "ProtectedFlow":
        user = self.current_user
        if self.state is not FlowState.AUTHENTICATED or user is None:
            raise FlowStateError(f"Protected flow is not available while {self.state}")
        return ProtectedFlow(self, user)

    def _transition(self, new: SessionContext) -> None:
        if new == self._session:
            return
        old_state = self.state
        self._session = new
        logger.debug(f"Session state {old_state} -> {new.state}")
        for listener in list(self._listeners):
            try:
                listener(new)
            except Exception as exc:
                logger.error(f"Session listener {listener!r} failed: {exc}")


class AuthFlow:
    """Operations offered to the login and register screens."""

    def __init__(self, controller: SessionFlowController):
        self._controller = controller

    async def login(self, email: str, password: str) -> AuthResult:
        return await self._controller.login(email, password)

    async def register(self, username: str, email: str, password: str) -> AuthResult:
        return await self._controller.register(username, email, password)

    def on_login(self, user: User) -> None:
        self._controller.on_login(user)


class ProtectedFlow:
    """
    What the authenticated screens receive: the logged-in user and a logout action.

    'user' is fixed when the flow is created, like a screen prop; a later
    login as someone else produces a new 'ProtectedFlow'.
    """

    def __init__(self, controller: SessionFlowController, user: User):
        self._controller = controller
        self.user = user

    async def logout(self) -> None:
        await self._controller.logout()

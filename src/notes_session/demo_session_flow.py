"""
Session flow walkthrough.

Runs the full register / login / logout cycle against the configured file
store, one step per function, logging the session state after each step.
Because the store is durable, running it twice shows restoration at work:
the second run starts in whatever state the first one left behind.

Steps at a glance:
    1  restore()         - Start the controller and restore any saved session
    2  register_alice()  - Register alice@example.com (rejected if already present)
    3  register_clash()  - Try to register a second user with the same email
    4  login_alice()     - Log in with alice's credentials
    5  logout()          - Log out and confirm nothing is restored afterwards

Configuration comes from the NOTES_SESSION_* variables (see 'notes_session.config').
Set RESET_STORE=1 to remove the session keys before starting.

Usage:
    python -m notes_session.demo_session_flow
    RESET_STORE=1 NOTES_SESSION_CREDENTIALS=pbkdf2 python -m notes_session.demo_session_flow
"""

import asyncio
import os

from loguru import logger

from notes_session.auth.data_models.user import User
from notes_session.auth.manager import SESSION_KEY, USERS_KEY, SessionAuthManager
from notes_session.config import SessionSettings, build_manager, configure_logging
from notes_session.flow.controller import SessionFlowController

ALICE = ("alice", "alice@example.com", "pw1")


def _describe(controller: SessionFlowController) -> str:
    user = controller.current_user
    who = f"{user.username} ({user.id})" if user else "nobody"
    return f"state={controller.state}, flow={controller.current_flow}, user={who}"


async def restore(controller: SessionFlowController) -> None:
    await controller.start()
    logger.info(f"After restore: {_describe(controller)}")


async def register_alice(controller: SessionFlowController) -> None:
    username, email, password = ALICE
    result = await controller.register(username, email, password)
    if isinstance(result, User):
        logger.info(f"Registered {result.username} with id {result.id}")
    else:
        logger.info(f"Registration refused: {result.reason}")
    logger.info(f"After register: {_describe(controller)}")


async def register_clash(controller: SessionFlowController) -> None:
    _, email, _ = ALICE
    result = await controller.register("bob", email, "pw2")
    logger.info(f"Second registration with {email!r}: {result}")


async def login_alice(controller: SessionFlowController) -> None:
    _, email, password = ALICE
    result = await controller.login(email, password)
    logger.info(f"Login result: {result if not isinstance(result, User) else result.id}")
    logger.info(f"After login: {_describe(controller)}")


async def logout(controller: SessionFlowController, manager: SessionAuthManager) -> None:
    await controller.logout()
    logger.info(f"After logout: {_describe(controller)}")
    logger.info(f"Persisted session after logout: {await manager.restore_session()}")


async def main(settings: SessionSettings, reset_store: bool = False) -> None:
    manager = build_manager(settings)
    if reset_store:
        await manager.store.remove(USERS_KEY)
        await manager.store.remove(SESSION_KEY)
        logger.info("Removed existing session keys")

    controller = SessionFlowController(manager)
    controller.subscribe(lambda session: logger.debug(f"Listener saw state {session.state}"))

    logger.info("Starting session flow walkthrough")
    await restore(controller)
    if controller.current_user is not None:
        await logout(controller, manager)
    await register_alice(controller)
    await register_clash(controller)
    await logout(controller, manager)
    await login_alice(controller)
    await logout(controller, manager)
    logger.info(f"Registered users: {[u.email for u in await manager.list_users()]}")
    logger.info("Session flow walkthrough done")


if __name__ == "__main__":
    _settings = SessionSettings.from_env()
    configure_logging(_settings.log_level)
    asyncio.run(main(_settings, reset_store=os.getenv("RESET_STORE", "0") == "1"))

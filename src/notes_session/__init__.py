"""
Local authentication and session layer for the notes app.

Three layers, each built only on the one before it:

    storage  - async key-value store ('InMemoryKeyValueStore', 'JsonFileKeyValueStore')
    auth     - 'SessionAuthManager': register / login / logout / restore_session
    flow     - 'SessionFlowController': which flow (auth or protected) the UI shows
"""

from notes_session.auth import Rejected, RejectionReason, SessionAuthManager, User
from notes_session.exceptions import ConfigurationError, FlowStateError, NotesSessionError, StorageError
from notes_session.flow import FlowKind, FlowState, SessionContext, SessionFlowController
from notes_session.storage import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore

__all__ = [
    "ConfigurationError",
    "FlowKind",
    "FlowState",
    "FlowStateError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "NotesSessionError",
    "Rejected",
    "RejectionReason",
    "SessionAuthManager",
    "SessionContext",
    "SessionFlowController",
    "StorageError",
    "User",
]

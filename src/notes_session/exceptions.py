"""
Exception hierarchy for the notes session layer.

Only infrastructure and programming errors are exceptions. Authentication
decisions (duplicate email, bad credentials) are returned as 'Rejected'
values by 'SessionAuthManager' so callers always branch on the outcome.
"""


class NotesSessionError(Exception):
    """Base class for all errors raised by this package."""


class StorageError(NotesSessionError):
    """A key-value store could not serialize, write or delete a value."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"{message} (key={key!r})")
        self.key = key


class FlowStateError(NotesSessionError):
    """A flow handle was requested while the controller is in another state."""


class ConfigurationError(NotesSessionError):
    """An environment setting is missing or has an invalid value."""

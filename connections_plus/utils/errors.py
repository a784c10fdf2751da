"""
Error Types

Exceptions raised by services and translated into HTTP responses by the
controllers. Each type carries the status code it maps to.
"""


class ConnectionsError(Exception):
    """Base class for all expected application failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ConnectionsError):
    """Malformed input: bad date, missing or ill-shaped fields."""
    status_code = 400


class NotFoundError(ConnectionsError):
    """The requested game, draft or session does not exist."""
    status_code = 404


class ProgressLockedError(ConnectionsError):
    """Progress for this player and game is already marked completed."""
    status_code = 400


class WordGenerationError(ConnectionsError):
    """The word generator failed or returned an unusable answer."""
    status_code = 500


class StorageError(ConnectionsError):
    """The key-value store could not be read or written."""
    status_code = 500

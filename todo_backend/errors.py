"""Error taxonomy surfaced to HTTP callers as ``{"error": message}``."""


class TodoError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TodoError):
    """A required field is missing or empty."""

    status_code = 400


class NotFoundError(TodoError):
    """Update or delete targeted an id with no matching row."""

    status_code = 404


class StorageError(TodoError):
    """Any failure raised by the persistence layer."""

    status_code = 500

from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class StoreUnavailableError(Exception):
    """Raised when the backing store cannot complete an operation.

    The caller must not assume anything was written. Messages are not shown to
    the user verbatim.
    """

    def __init__(self, message: str = "Backing store is unavailable") -> None:
        super().__init__(message)

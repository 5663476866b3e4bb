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


class AuthenticationError(UserError):
    """Raised when the transport layer cannot identify the acting user."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class ConflictError(UserError):
    """Raised when a write would break a uniqueness rule (e.g. duplicate option name)."""


class ValidationError(UserError):
    """Raised when user input fails validation."""


class UnsupportedTypeError(ValidationError):
    """Raised when a value is written to a field whose type accepts no client values."""


class BadRequestError(UserError):
    """Raised when a request is malformed, e.g. a filter names a field the base does not have."""


class InternalError(Exception):
    """Raised when stored data breaks a schema invariant.

    Not a UserError: the caller cannot fix it, but the message is still
    safe to return since it only carries ids.
    """

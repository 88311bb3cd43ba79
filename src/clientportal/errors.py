"""Error taxonomy for portal operations.

Service operations raise these; the HTTP layer renders each one as the
standard response envelope using ``status_code``.
"""

from __future__ import annotations


class PortalError(Exception):
    """Base class for errors surfaced to API callers.

    Attributes:
        message: Human-readable description returned to the caller.
        status_code: HTTP status used in the response envelope.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(PortalError):
    """A required field is missing or a value cannot be parsed."""

    status_code = 400


class NotFoundError(PortalError):
    """The referenced project, collaborator or service does not exist."""

    status_code = 404


class ConflictError(PortalError):
    """The requested transition is not allowed in the current state.

    Reported with 400 because API clients treat every refused request
    the same way.
    """

    status_code = 400


class AlreadyOwnedError(ConflictError):
    """The client tried to duplicate a project they already own."""

    def __init__(self, message: str = "This is already your project") -> None:
        super().__init__(message)


class AuthError(PortalError):
    """No authenticated identity accompanies the request."""

    status_code = 401

    def __init__(self, message: str = "User not authenticated") -> None:
        super().__init__(message)


class UnexpectedError(PortalError):
    """A store or transport failure with its underlying message."""

    status_code = 500

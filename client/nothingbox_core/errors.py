"""
Error types raised by the service client and local validation.

NotFoundError and ConflictError are expected outcomes the caller branches on.
TransientError covers everything else that went wrong on the wire.
"""


class ServiceError(Exception):
    """Base class for remote service failures."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(ServiceError):
    """The requested user does not exist (HTTP 404)."""


class ConflictError(ServiceError):
    """Username already taken (HTTP 409)."""


class TransientError(ServiceError):
    """Network failure, timeout, unexpected status, or unreadable body."""


class RegistrationError(ValueError):
    """Registration input rejected locally, before any request is made."""


class InvalidTransition(RuntimeError):
    """A session-state change that would break its invariants."""

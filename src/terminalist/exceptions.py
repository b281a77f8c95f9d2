"""Exceptions raised by the terminalist sync core."""

from __future__ import annotations


class TerminalistError(Exception):
    """Base exception for all terminalist errors."""


class ResolutionError(TerminalistError):
    """Raised when a required remote-to-local id mapping is missing locally."""

    def __init__(self, message: str, remote_id: str | None = None):
        super().__init__(message)
        self.remote_id = remote_id


class BackendError(TerminalistError):
    """Raised when a remote backend call fails.

    The message comes from the remote side and may contain sensitive detail;
    it is passed through verbatim.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFoundError(TerminalistError):
    """Raised when a local row does not exist."""


class TransactionError(TerminalistError):
    """Raised when a local transaction fails to commit."""


class OperationError(TerminalistError):
    """A user operation failed; the message is "<context prefix>: <cause>"."""

"""Exception hierarchy for the HBase client.

Two kinds of errors leave the public API: ``InvalidArgumentError`` for caller
mistakes detected before any I/O, and ``ServiceError`` wrapping anything the
storage engine or its connection layer raised. The ``StoreError`` family is
what connection implementations raise; it never escapes a public operation
unwrapped.
"""

from __future__ import annotations


class HBaseClientError(Exception):
    """Base exception for all client errors."""
    pass


class InvalidArgumentError(HBaseClientError, ValueError):
    """Raised when a required parameter is blank or missing."""
    pass


class ServiceError(HBaseClientError):
    """Raised when the underlying store or its connection fails.

    Args:
        message: Human readable description
        cause: The original exception
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause

    def __str__(self) -> str:
        base = super().__str__()
        if self.cause is None:
            return base
        return f"{base}: {type(self.cause).__name__}: {self.cause}"


class StoreError(Exception):
    """Base exception for errors native to the storage engine."""
    pass


class StoreIOError(StoreError):
    """Generic I/O failure talking to the store."""
    pass


class CoordinationConnectionError(StoreIOError):
    """Raised when the coordination service cannot be reached."""
    pass


class MasterNotRunningError(StoreIOError):
    """Raised when the master service is not running."""
    pass


class TableNotFoundError(StoreIOError):
    """Raised when a table does not exist."""
    pass


class TableExistsError(StoreIOError):
    """Raised when creating a table that already exists."""
    pass


class TableNotEnabledError(StoreIOError):
    """Raised when an operation needs an enabled table."""
    pass


class TableNotDisabledError(StoreIOError):
    """Raised when an operation needs a disabled table."""
    pass


class NoSuchColumnFamilyError(StoreIOError):
    """Raised when a column family is not part of the table."""
    pass


class ScannerClosedError(StoreIOError):
    """Raised when fetching from a scanner that was already closed."""
    pass


def root_cause(exc: BaseException) -> BaseException:
    """Unwrap ``ServiceError`` layers down to the store-native cause."""
    while isinstance(exc, ServiceError) and exc.cause is not None:
        exc = exc.cause
    return exc


def degrade_to_bool(exc: BaseException, *known: type[BaseException]) -> bool:
    """Map a known failure cause to ``False``; re-raise anything else.

    Used by liveness and existence checks whose question is yes/no rather
    than diagnostic detail.
    """
    if isinstance(root_cause(exc), known):
        return False
    raise exc

"""Resource scope manager.

Every logical operation runs inside exactly one admin or table handle that
is acquired for it and released on every exit path.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

from .errors import InvalidArgumentError, ServiceError

if TYPE_CHECKING:
    from ..interfaces.connection import AdminHandle, ConnectionFactory
    from ..interfaces.table import TableHandle
    from .config import HBaseConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


def require_text(value: object, name: str) -> None:
    """Raise InvalidArgumentError unless value is a non-blank str or bytes."""
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f"{name} must not be blank")


class ResourceScope:
    """Acquire, use and release store handles.

    Args:
        factory: Creates admin and table handles
        config: Shared configuration; each handle gets a snapshot of it
    """

    def __init__(self, factory: ConnectionFactory, config: HBaseConfig):
        self.factory = factory
        self.config = config

    def with_admin(self, op: Callable[[AdminHandle], T]) -> T:
        """Run op against a fresh admin handle and always release it."""
        if not callable(op):
            raise InvalidArgumentError("op must be callable")
        try:
            admin = self.factory.create_admin(self.config.snapshot())
        except Exception as e:
            raise ServiceError("Could not acquire admin connection", cause=e) from e
        logger.debug("Acquired admin handle")

        failed = True
        try:
            result = op(admin)
            failed = False
            return result
        except (ServiceError, InvalidArgumentError):
            raise
        except Exception as e:
            raise ServiceError("Admin operation failed", cause=e) from e
        finally:
            self._release(admin, "admin", suppress=failed)

    def with_table(self, table_name: str, op: Callable[[TableHandle], T], close_on_exit: bool = True) -> T:
        """Run op against a handle bound to table_name.

        With close_on_exit=False the handle stays open after a successful
        op and the caller owns releasing it; on failure it is released here.
        """
        require_text(table_name, "table_name")
        if not callable(op):
            raise InvalidArgumentError("op must be callable")
        name = table_name if isinstance(table_name, bytes) else table_name.encode("utf-8")
        try:
            table = self.factory.create_table(self.config.snapshot(), name)
        except Exception as e:
            raise ServiceError(f"Could not acquire table {table_name!r}", cause=e) from e
        logger.debug(f"Acquired table handle for {table_name!r}")

        failed = True
        try:
            result = op(table)
            failed = False
            return result
        except (ServiceError, InvalidArgumentError):
            raise
        except Exception as e:
            raise ServiceError(f"Operation on table {table_name!r} failed", cause=e) from e
        finally:
            if close_on_exit or failed:
                self._release(table, f"table {table_name!r}", suppress=failed)

    def _release(self, handle, label: str, suppress: bool) -> None:
        """Close a handle; a close failure never hides an error already in flight."""
        try:
            handle.close()
            logger.debug(f"Released {label} handle")
        except Exception as e:
            if suppress:
                logger.warning(f"Failed to release {label} handle: {e}")
                return
            raise ServiceError(f"Could not release {label} handle", cause=e) from e

"""Protocol definitions for the storage engine connection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..components.descriptors import ColumnFamilyDescriptor, TableDescriptor
    from .table import TableHandle


class AdminHandle(Protocol):
    """Administrative connection; one per logical admin operation."""

    def is_master_running(self) -> bool:
        """Return True if the master service answers."""
        ...

    def create_table(self, descriptor: TableDescriptor) -> None:
        """Create a table; raises TableExistsError if present."""
        ...

    def get_table_descriptor(self, name: bytes) -> TableDescriptor:
        """Return the table descriptor; raises TableNotFoundError if absent."""
        ...

    def delete_table(self, name: str) -> None:
        """Delete a disabled table."""
        ...

    def is_table_disabled(self, name: str) -> bool:
        ...

    def enable_table(self, name: str) -> None:
        ...

    def disable_table(self, name: str) -> None:
        ...

    def add_column(self, name: str, descriptor: ColumnFamilyDescriptor) -> None:
        """Add a column family to a disabled table."""
        ...

    def modify_column(self, name: str, descriptor: ColumnFamilyDescriptor) -> None:
        """Replace an existing column family descriptor on a disabled table."""
        ...

    def delete_column(self, name: str, family: str) -> None:
        """Remove a column family from a disabled table."""
        ...

    def flush(self, name: str) -> None:
        """Force in-memory state of the table to durable storage."""
        ...

    def close(self) -> None:
        """Release the connection."""
        ...


class ConnectionFactory(Protocol):
    """Creates admin and table handles bound to a configuration snapshot."""

    def create_admin(self, properties: Mapping[str, str]) -> AdminHandle:
        """Open an admin handle; raises CoordinationConnectionError if unreachable."""
        ...

    def create_table(self, properties: Mapping[str, str], name: bytes) -> TableHandle:
        """Open a table handle; raises TableNotFoundError if absent."""
        ...

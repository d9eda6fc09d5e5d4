"""Protocol definitions for table-bound handles and scanners."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..components.descriptors import TableDescriptor
    from ..components.requests import Delete, Get, Put, Scan
    from ..components.result import RowResult


class ResultScanner(Protocol):
    """Server-side cursor over a sorted row range."""

    def next(self, n: int) -> Sequence[RowResult]:
        """Fetch up to n further rows; fewer (or none) near the end."""
        ...

    def close(self) -> None:
        """Release the cursor."""
        ...


class TableHandle(Protocol):
    """Connection bound to one table."""

    def get_table_descriptor(self) -> TableDescriptor:
        ...

    def get(self, get: Get) -> RowResult:
        """Point read; returns an empty result when nothing matches."""
        ...

    def put(self, put: Put) -> None:
        ...

    def delete(self, delete: Delete) -> None:
        ...

    def get_scanner(self, scan: Scan) -> ResultScanner:
        ...

    def increment_column_value(
        self, row: bytes, family: bytes, qualifier: bytes, amount: int, write_to_wal: bool
    ) -> int:
        """Atomically add amount to an 8-byte counter cell and return the new value."""
        ...

    def check_and_put(
        self, row: bytes, family: bytes, qualifier: bytes, value: bytes | None, put: Put
    ) -> bool:
        """Apply put only if the current cell value equals value (None: cell absent)."""
        ...

    def check_and_delete(
        self, row: bytes, family: bytes, qualifier: bytes, value: bytes | None, delete: Delete
    ) -> bool:
        """Apply delete only if the current cell value equals value (None: cell absent)."""
        ...

    def close(self) -> None:
        """Release the connection."""
        ...

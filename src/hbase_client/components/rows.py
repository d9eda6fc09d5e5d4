"""Row-level data operations.

Each operation builds one request inside a table-scoped handle, so any
failure while building or executing it surfaces as ServiceError.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..core.errors import InvalidArgumentError
from ..core.scope import require_text
from ..core.types import Identifier, Timestamp
from .requests import build_delete, build_get, build_put, build_scan
from .scanner import ScanIterator

if TYPE_CHECKING:
    from ..core.scope import ResourceScope
    from .codec import ByteArrayConverter
    from .result import RowResult

logger = logging.getLogger(__name__)


class RowOperations:
    """Get, put, delete, scan and atomic mutations on top of a ResourceScope."""

    _scope: ResourceScope
    _codec: ByteArrayConverter

    def get(
        self,
        table_name: str,
        row: Identifier,
        family: Identifier | None = None,
        qualifier: Identifier | None = None,
        max_versions: int | None = None,
        timestamp: Timestamp | None = None,
    ) -> RowResult:
        """Point read of one row.

        Without family every family is returned; qualifier narrows within
        family and is ignored without it. timestamp restricts the read to
        that exact version.
        """
        return self._scope.with_table(
            table_name,
            lambda table: table.get(build_get(self._codec, row, family, qualifier, max_versions, timestamp)),
        )

    def exists(
        self,
        table_name: str,
        row: Identifier,
        max_versions: int | None = None,
        timestamp: Timestamp | None = None,
    ) -> bool:
        return not self.get(table_name, row, None, None, max_versions, timestamp).is_empty()

    def put(
        self,
        table_name: str,
        row: Identifier,
        family: Identifier,
        qualifier: Identifier,
        value: Any,
        timestamp: Timestamp | None = None,
        write_to_wal: bool = True,
    ) -> None:
        """Write one cell; without timestamp the store assigns the current time.

        write_to_wal=False acknowledges before journaling, so a crash right
        after may lose the write.
        """
        if family is None or qualifier is None:
            raise InvalidArgumentError("family and qualifier are required for put")
        self._scope.with_table(
            table_name,
            lambda table: table.put(
                build_put(self._codec, row, family, qualifier, value, timestamp, write_to_wal)
            ),
        )

    def delete(
        self,
        table_name: str,
        row: Identifier,
        family: Identifier | None = None,
        qualifier: Identifier | None = None,
        timestamp: Timestamp | None = None,
        delete_all_versions: bool = True,
    ) -> None:
        """Delete a column, a family or a whole row up to a cut-off.

        With family and qualifier, delete_all_versions chooses between every
        version at or under the cut-off and exactly the version at it. The
        cut-off is the latest version when timestamp is omitted.
        """
        self._scope.with_table(
            table_name,
            lambda table: table.delete(
                build_delete(self._codec, row, family, qualifier, timestamp, delete_all_versions)
            ),
        )

    def scan(
        self,
        table_name: str,
        family: Identifier | None = None,
        qualifier: Identifier | None = None,
        timestamp: Timestamp | None = None,
        max_timestamp: Timestamp | None = None,
        caching: int | None = None,
        cache_blocks: bool = True,
        max_versions: int | None = None,
        start_row: Identifier | None = None,
        stop_row: Identifier | None = None,
        fetch_size: int | None = None,
    ) -> ScanIterator:
        """Return a lazy iterator over rows in [start_row, stop_row).

        No page is fetched until the first ``next()``. The table handle stays
        open until the iterator is exhausted or closed; use it as a context
        manager when iteration may stop early.

        max_timestamp without timestamp selects every version below it, i.e.
        the range [0, max_timestamp); it is not ignored.
        """
        if fetch_size is None:
            fetch_size = self._scope.config.scan_fetch_size
        if max_versions is None:
            max_versions = self._scope.config.scan_max_versions
        if isinstance(fetch_size, bool) or not isinstance(fetch_size, int) or fetch_size <= 0:
            raise InvalidArgumentError(f"fetch_size must be a positive integer, got {fetch_size!r}")

        def op(table) -> ScanIterator:
            request = build_scan(
                self._codec,
                family,
                qualifier,
                timestamp,
                max_timestamp,
                caching,
                cache_blocks,
                max_versions,
                start_row,
                stop_row,
            )
            return ScanIterator(table, request, fetch_size)

        return self._scope.with_table(table_name, op, close_on_exit=False)

    def increment(
        self,
        table_name: str,
        row: Identifier,
        family: Identifier,
        qualifier: Identifier,
        amount: int,
        write_to_wal: bool = True,
    ) -> int:
        """Atomically add amount to a counter cell (absent counts as zero)."""
        require_text(table_name, "table_name")
        require_text(row, "row")
        require_text(family, "family")
        require_text(qualifier, "qualifier")
        codec = self._codec
        return self._scope.with_table(
            table_name,
            lambda table: table.increment_column_value(
                codec.identifier(row),
                codec.identifier(family),
                codec.identifier(qualifier),
                int(amount),
                bool(write_to_wal),
            ),
        )

    def check_and_put(
        self,
        table_name: str,
        row: Identifier,
        check_family: Identifier,
        check_qualifier: Identifier,
        expected_value: Any | None,
        put_family: Identifier,
        put_qualifier: Identifier,
        put_value: Any,
        put_timestamp: Timestamp | None = None,
        write_to_wal: bool = True,
    ) -> bool:
        """Apply a put only if the checked cell holds expected_value.

        expected_value=None means the checked cell must not exist. Returns
        whether the put was applied.
        """
        codec = self._codec

        def op(table) -> bool:
            put = build_put(codec, row, put_family, put_qualifier, put_value, put_timestamp, write_to_wal)
            return table.check_and_put(
                codec.identifier(row),
                codec.identifier(check_family),
                codec.identifier(check_qualifier),
                self._expected(expected_value),
                put,
            )

        applied = self._scope.with_table(table_name, op)
        logger.debug(f"check_and_put on {table_name!r} applied={applied}")
        return applied

    def check_and_delete(
        self,
        table_name: str,
        row: Identifier,
        check_family: Identifier,
        check_qualifier: Identifier,
        expected_value: Any | None,
        delete_family: Identifier | None = None,
        delete_qualifier: Identifier | None = None,
        delete_timestamp: Timestamp | None = None,
        delete_all_versions: bool = True,
    ) -> bool:
        """Apply a delete only if the checked cell holds expected_value."""
        codec = self._codec

        def op(table) -> bool:
            delete = build_delete(
                codec, row, delete_family, delete_qualifier, delete_timestamp, delete_all_versions
            )
            return table.check_and_delete(
                codec.identifier(row),
                codec.identifier(check_family),
                codec.identifier(check_qualifier),
                self._expected(expected_value),
                delete,
            )

        applied = self._scope.with_table(table_name, op)
        logger.debug(f"check_and_delete on {table_name!r} applied={applied}")
        return applied

    def _expected(self, value: Any | None) -> bytes | None:
        return None if value is None else self._codec.to_bytes(value)

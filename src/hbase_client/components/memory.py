"""In-memory storage engine.

Implements the connection protocols against process-local state so the
client can run without a cluster. Rows live in a SortedDict per table;
each column keeps its versions newest first, trimmed to the family's
max_versions.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from sortedcontainers import SortedDict

from ..core.errors import (
    CoordinationConnectionError,
    MasterNotRunningError,
    NoSuchColumnFamilyError,
    ScannerClosedError,
    StoreIOError,
    TableExistsError,
    TableNotDisabledError,
    TableNotEnabledError,
    TableNotFoundError,
)
from ..core.types import LATEST_TIMESTAMP, Cell, TimeRange, Timestamp
from .codec import decode_long, encode_long
from .descriptors import ColumnFamilyDescriptor, TableDescriptor
from .requests import ColumnMap, Delete, DeleteKind, Get, Put, Scan, column_selected
from .result import RowResult

logger = logging.getLogger(__name__)

CLIENT_PORT_KEY = "hbase.zookeeper.property.clientPort"


@dataclass
class _TableState:
    """Descriptor, state flag and rows: row -> {(family, qualifier): [(ts, value), ...] newest first}."""

    descriptor: TableDescriptor
    enabled: bool = True
    rows: SortedDict = field(default_factory=SortedDict)


class InMemoryCluster:
    """Thread-safe in-process store implementing ConnectionFactory.

    Args:
        client_port: Port a configuration must name to reach the cluster
        reachable: False simulates an unreachable coordination service
        master_running: False simulates a stopped master

    Invariants:
        - Store-assigned timestamps are strictly increasing milliseconds
        - Every handle and scanner is counted while open
        - Only the most recently opened table handle and scanner are kept
          for inspection
    """

    def __init__(self, client_port: str = "2181", reachable: bool = True, master_running: bool = True):
        self.client_port = client_port
        self.reachable = reachable
        self.master_running = master_running
        self._lock = threading.RLock()
        self._tables: dict[str, _TableState] = {}
        self._clock = int(time.time() * 1000)
        self.open_admins = 0
        self.open_tables = 0
        self.open_scanners = 0
        self.last_scanner: InMemoryScanner | None = None
        self.last_table_handle: InMemoryTable | None = None
        self.flushed: list[str] = []

    @property
    def open_handles(self) -> int:
        return self.open_admins + self.open_tables + self.open_scanners

    # ConnectionFactory

    def create_admin(self, properties: Mapping[str, str]) -> InMemoryAdmin:
        self._connect(properties)
        with self._lock:
            self.open_admins += 1
        return InMemoryAdmin(self, properties)

    def create_table(self, properties: Mapping[str, str], name: bytes) -> InMemoryTable:
        self._connect(properties)
        table_name = name.decode("utf-8")
        with self._lock:
            self._state(table_name)
            self.open_tables += 1
            handle = InMemoryTable(self, table_name, properties)
            self.last_table_handle = handle
        return handle

    def _connect(self, properties: Mapping[str, str]) -> None:
        port = properties.get(CLIENT_PORT_KEY)
        if not self.reachable or port != self.client_port:
            raise CoordinationConnectionError(f"Coordination service not reachable on port {port}")

    # Internal state access (callers hold the lock)

    def _state(self, name: str) -> _TableState:
        state = self._tables.get(name)
        if state is None:
            raise TableNotFoundError(name)
        return state

    def _next_timestamp(self) -> Timestamp:
        """Generate monotonically increasing timestamp."""
        with self._lock:
            self._clock = max(int(time.time() * 1000), self._clock + 1)
            return self._clock


class _Handle:
    """Open/closed bookkeeping shared by admin and table handles."""

    _counter: str

    def __init__(self, cluster: InMemoryCluster, properties: Mapping[str, str]):
        self.cluster = cluster
        self.properties = dict(properties)
        self.closed = False

    def _check_open(self) -> None:
        if self.closed:
            raise StoreIOError(f"{type(self).__name__} is closed")

    def close(self) -> None:
        with self.cluster._lock:
            if self.closed:
                return
            self.closed = True
            setattr(self.cluster, self._counter, getattr(self.cluster, self._counter) - 1)


class InMemoryAdmin(_Handle):
    """Admin handle over an InMemoryCluster."""

    _counter = "open_admins"

    def is_master_running(self) -> bool:
        self._check_open()
        if not self.cluster.master_running:
            raise MasterNotRunningError("Master is not running")
        return True

    def create_table(self, descriptor: TableDescriptor) -> None:
        self._check_open()
        with self.cluster._lock:
            if descriptor.name in self.cluster._tables:
                raise TableExistsError(descriptor.name)
            self.cluster._tables[descriptor.name] = _TableState(descriptor)
        logger.debug(f"Created in-memory table {descriptor.name!r}")

    def get_table_descriptor(self, name: bytes) -> TableDescriptor:
        self._check_open()
        with self.cluster._lock:
            return self.cluster._state(name.decode("utf-8")).descriptor

    def delete_table(self, name: str) -> None:
        self._check_open()
        with self.cluster._lock:
            state = self.cluster._state(name)
            if state.enabled:
                raise TableNotDisabledError(name)
            del self.cluster._tables[name]
        logger.debug(f"Dropped in-memory table {name!r}")

    def is_table_disabled(self, name: str) -> bool:
        self._check_open()
        with self.cluster._lock:
            return not self.cluster._state(name).enabled

    def enable_table(self, name: str) -> None:
        self._check_open()
        with self.cluster._lock:
            state = self.cluster._state(name)
            if state.enabled:
                raise TableNotDisabledError(name)
            state.enabled = True

    def disable_table(self, name: str) -> None:
        self._check_open()
        with self.cluster._lock:
            state = self.cluster._state(name)
            if not state.enabled:
                raise TableNotEnabledError(name)
            state.enabled = False

    def add_column(self, name: str, descriptor: ColumnFamilyDescriptor) -> None:
        self._check_open()
        with self.cluster._lock:
            state = self._disabled_state(name)
            if state.descriptor.has_family(descriptor.name):
                raise StoreIOError(f"Column family {descriptor.name!r} already exists in {name!r}")
            state.descriptor = state.descriptor.with_family(descriptor)

    def modify_column(self, name: str, descriptor: ColumnFamilyDescriptor) -> None:
        self._check_open()
        with self.cluster._lock:
            state = self._disabled_state(name)
            if not state.descriptor.has_family(descriptor.name):
                raise NoSuchColumnFamilyError(descriptor.name)
            state.descriptor = state.descriptor.with_family(descriptor)
            family = descriptor.name.encode("utf-8")
            for row in list(state.rows):
                _trim(state.rows, row, family, descriptor.max_versions)

    def delete_column(self, name: str, family: str) -> None:
        self._check_open()
        with self.cluster._lock:
            state = self._disabled_state(name)
            if not state.descriptor.has_family(family):
                raise NoSuchColumnFamilyError(family)
            state.descriptor = state.descriptor.without_family(family)
            fam = family.encode("utf-8")
            for row in list(state.rows):
                columns = state.rows[row]
                for key in [k for k in columns if k[0] == fam]:
                    del columns[key]
                if not columns:
                    del state.rows[row]

    def flush(self, name: str) -> None:
        """Nothing to persist in memory; records the request."""
        self._check_open()
        with self.cluster._lock:
            self.cluster.flushed.append(name)

    def _disabled_state(self, name: str) -> _TableState:
        state = self.cluster._state(name)
        if state.enabled:
            raise TableNotDisabledError(name)
        return state


class InMemoryTable(_Handle):
    """Table handle over an InMemoryCluster."""

    _counter = "open_tables"

    def __init__(self, cluster: InMemoryCluster, name: str, properties: Mapping[str, str]):
        super().__init__(cluster, properties)
        self.name = name

    def _enabled_state(self) -> _TableState:
        self._check_open()
        state = self.cluster._state(self.name)
        if not state.enabled:
            raise TableNotEnabledError(self.name)
        return state

    def _family(self, state: _TableState, family: bytes) -> ColumnFamilyDescriptor:
        descriptor = state.descriptor.get_family(family)
        if descriptor is None:
            raise NoSuchColumnFamilyError(f"{family!r} in table {self.name!r}")
        return descriptor

    def _check_columns(self, state: _TableState, columns: ColumnMap) -> None:
        for family in columns:
            self._family(state, family)

    def get_table_descriptor(self) -> TableDescriptor:
        self._check_open()
        with self.cluster._lock:
            return self.cluster._state(self.name).descriptor

    def get(self, get: Get) -> RowResult:
        with self.cluster._lock:
            state = self._enabled_state()
            self._check_columns(state, get.columns)
            return _read_row(state, get.row, get.columns, get.time_range, get.max_versions)

    def put(self, put: Put) -> None:
        with self.cluster._lock:
            state = self._enabled_state()
            self._apply_put(state, put)

    def delete(self, delete: Delete) -> None:
        with self.cluster._lock:
            state = self._enabled_state()
            self._apply_delete(state, delete)

    def get_scanner(self, scan: Scan) -> InMemoryScanner:
        with self.cluster._lock:
            state = self._enabled_state()
            self._check_columns(state, scan.columns)
            lower = scan.start_row or None
            upper = scan.stop_row or None
            if lower is not None and upper is not None and upper <= lower:
                keys: list[bytes] = []
            else:
                keys = list(state.rows.irange(lower, upper, inclusive=(True, False)))
            scanner = InMemoryScanner(self, scan, keys)
            self.cluster.last_scanner = scanner
            self.cluster.open_scanners += 1
        return scanner

    def increment_column_value(
        self, row: bytes, family: bytes, qualifier: bytes, amount: int, write_to_wal: bool
    ) -> int:
        with self.cluster._lock:
            state = self._enabled_state()
            descriptor = self._family(state, family)
            current = _latest_value(state, row, family, qualifier)
            try:
                total = (decode_long(current) if current is not None else 0) + amount
            except ValueError as e:
                raise StoreIOError(f"Cannot increment {family!r}:{qualifier!r}: {e}") from e
            _write(state, row, family, qualifier, self.cluster._next_timestamp(), encode_long(total))
            _trim(state.rows, row, family, descriptor.max_versions)
            return total

    def check_and_put(
        self, row: bytes, family: bytes, qualifier: bytes, value: bytes | None, put: Put
    ) -> bool:
        if put.row != row:
            raise StoreIOError("Put row must match the checked row")
        with self.cluster._lock:
            state = self._enabled_state()
            self._family(state, family)
            if _latest_value(state, row, family, qualifier) != value:
                return False
            self._apply_put(state, put)
            return True

    def check_and_delete(
        self, row: bytes, family: bytes, qualifier: bytes, value: bytes | None, delete: Delete
    ) -> bool:
        if delete.row != row:
            raise StoreIOError("Delete row must match the checked row")
        with self.cluster._lock:
            state = self._enabled_state()
            self._family(state, family)
            if _latest_value(state, row, family, qualifier) != value:
                return False
            self._apply_delete(state, delete)
            return True

    def _apply_put(self, state: _TableState, put: Put) -> None:
        for cell in put.cells:
            descriptor = self._family(state, cell.family)
            ts = cell.timestamp if cell.timestamp is not None else self.cluster._next_timestamp()
            _write(state, put.row, cell.family, cell.qualifier, ts, cell.value)
            _trim(state.rows, put.row, cell.family, descriptor.max_versions)

    def _apply_delete(self, state: _TableState, delete: Delete) -> None:
        for marker in delete.markers:
            self._family(state, marker.family)
        columns = state.rows.get(delete.row)
        if columns is None:
            return

        if not delete.markers:
            for key in list(columns):
                columns[key] = [(ts, v) for ts, v in columns[key] if ts > delete.timestamp]
        for marker in delete.markers:
            for key in list(columns):
                family, qualifier = key
                if family != marker.family:
                    continue
                if marker.kind is DeleteKind.FAMILY or (
                    marker.kind is DeleteKind.COLUMNS and qualifier == marker.qualifier
                ):
                    columns[key] = [(ts, v) for ts, v in columns[key] if ts > marker.timestamp]
                elif marker.kind is DeleteKind.COLUMN and qualifier == marker.qualifier:
                    columns[key] = _drop_version(columns[key], marker.timestamp)

        for key in [k for k, versions in columns.items() if not versions]:
            del columns[key]
        if not columns:
            del state.rows[delete.row]


class InMemoryScanner:
    """Cursor over row keys captured when the scanner was opened."""

    def __init__(self, table: InMemoryTable, scan: Scan, keys: list[bytes]):
        self.table = table
        self.scan = scan
        self._keys = keys
        self._pos = 0
        self.closed = False
        self.fetches = 0

    def next(self, n: int) -> Sequence[RowResult]:
        if self.closed:
            raise ScannerClosedError("Scanner is closed")
        self.fetches += 1
        results: list[RowResult] = []
        with self.table.cluster._lock:
            state = self.table.cluster._state(self.table.name)
            while len(results) < n and self._pos < len(self._keys):
                row = self._keys[self._pos]
                self._pos += 1
                result = _read_row(state, row, self.scan.columns, self.scan.time_range, self.scan.max_versions)
                if not result.is_empty():
                    results.append(result)
        return results

    def close(self) -> None:
        with self.table.cluster._lock:
            if self.closed:
                return
            self.closed = True
            self.table.cluster.open_scanners -= 1


def _read_row(
    state: _TableState, row: bytes, columns: ColumnMap, time_range: TimeRange, max_versions: int
) -> RowResult:
    cells = []
    for (family, qualifier), versions in state.rows.get(row, {}).items():
        if not column_selected(columns, family, qualifier):
            continue
        matching = [(ts, v) for ts, v in versions if time_range.contains(ts)]
        for ts, value in matching[:max_versions]:
            cells.append(Cell(row, family, qualifier, ts, value))
    return RowResult(row, cells)


def _latest_value(state: _TableState, row: bytes, family: bytes, qualifier: bytes) -> bytes | None:
    versions = state.rows.get(row, {}).get((family, qualifier))
    return versions[0][1] if versions else None


def _write(state: _TableState, row: bytes, family: bytes, qualifier: bytes, ts: Timestamp, value: bytes) -> None:
    columns = state.rows.setdefault(row, {})
    versions = [(t, v) for t, v in columns.get((family, qualifier), []) if t != ts]
    versions.append((ts, value))
    versions.sort(key=lambda version: version[0], reverse=True)
    columns[(family, qualifier)] = versions


def _trim(rows: SortedDict, row: bytes, family: bytes, max_versions: int) -> None:
    columns = rows.get(row)
    if not columns:
        return
    for key in columns:
        if key[0] == family:
            columns[key] = columns[key][:max_versions]


def _drop_version(versions: list[tuple[Timestamp, bytes]], cutoff: Timestamp) -> list[tuple[Timestamp, bytes]]:
    """Remove the latest version (cutoff LATEST) or exactly the one at cutoff."""
    if cutoff == LATEST_TIMESTAMP:
        return versions[1:]
    return [(ts, v) for ts, v in versions if ts != cutoff]

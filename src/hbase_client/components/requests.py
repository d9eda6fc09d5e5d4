"""Low-level request objects and the builders that fill them in.

Builders translate the optional-field-rich public parameters into exactly one
well-formed request. Family and qualifier are encoded through the codec's
identifier rules; a qualifier is only meaningful together with a family.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..core.types import LATEST_TIMESTAMP, Identifier, TimeRange, Timestamp
from .codec import ByteArrayConverter

# family -> qualifiers (None selects the whole family); empty selects everything
ColumnMap = Mapping[bytes, frozenset[bytes] | None]


def column_selected(columns: ColumnMap, family: bytes, qualifier: bytes) -> bool:
    """Return True if (family, qualifier) passes the column selection."""
    if not columns:
        return True
    if family not in columns:
        return False
    qualifiers = columns[family]
    return qualifiers is None or qualifier in qualifiers


@dataclass(frozen=True)
class Get:
    row: bytes
    columns: ColumnMap = field(default_factory=dict)
    max_versions: int = 1
    time_range: TimeRange = field(default_factory=TimeRange)


@dataclass(frozen=True)
class PutCell:
    family: bytes
    qualifier: bytes
    value: bytes
    timestamp: Timestamp | None = None  # None: assigned by the store


@dataclass(frozen=True)
class Put:
    row: bytes
    cells: tuple[PutCell, ...]
    write_to_wal: bool = True


class DeleteKind(Enum):
    """Shape of a delete marker."""

    FAMILY = "family"  # every column of the family at or under the cut-off
    COLUMNS = "columns"  # every version of one column at or under the cut-off
    COLUMN = "column"  # exactly one version of one column


@dataclass(frozen=True)
class DeleteMarker:
    kind: DeleteKind
    family: bytes
    qualifier: bytes | None = None
    timestamp: Timestamp = LATEST_TIMESTAMP


@dataclass(frozen=True)
class Delete:
    """Row delete; with no markers the whole row is removed up to timestamp."""

    row: bytes
    markers: tuple[DeleteMarker, ...] = ()
    timestamp: Timestamp = LATEST_TIMESTAMP


@dataclass(frozen=True)
class Scan:
    columns: ColumnMap = field(default_factory=dict)
    time_range: TimeRange = field(default_factory=TimeRange)
    caching: int | None = None
    cache_blocks: bool = True
    max_versions: int = 1
    start_row: bytes = b""  # inclusive, empty means first row
    stop_row: bytes = b""  # exclusive, empty means past the last row


def _positive(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return value


def _timestamp(value: Any, name: str = "timestamp") -> Timestamp:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
    return value


def _columns(codec: ByteArrayConverter, family: Identifier | None, qualifier: Identifier | None) -> dict:
    if family is None:
        return {}
    if qualifier is None:
        return {codec.identifier(family): None}
    return {codec.identifier(family): frozenset([codec.identifier(qualifier)])}


def build_get(
    codec: ByteArrayConverter,
    row: Identifier,
    family: Identifier | None = None,
    qualifier: Identifier | None = None,
    max_versions: int | None = None,
    timestamp: Timestamp | None = None,
) -> Get:
    return Get(
        row=codec.identifier(row),
        columns=_columns(codec, family, qualifier),
        max_versions=1 if max_versions is None else _positive(max_versions, "max_versions"),
        time_range=TimeRange() if timestamp is None else TimeRange.at(_timestamp(timestamp)),
    )


def build_put(
    codec: ByteArrayConverter,
    row: Identifier,
    family: Identifier,
    qualifier: Identifier,
    value: Any,
    timestamp: Timestamp | None = None,
    write_to_wal: bool = True,
) -> Put:
    cell = PutCell(
        family=codec.identifier(family),
        qualifier=codec.identifier(qualifier),
        value=codec.to_bytes(value),
        timestamp=None if timestamp is None else _timestamp(timestamp),
    )
    return Put(row=codec.identifier(row), cells=(cell,), write_to_wal=bool(write_to_wal))


def build_delete(
    codec: ByteArrayConverter,
    row: Identifier,
    family: Identifier | None = None,
    qualifier: Identifier | None = None,
    timestamp: Timestamp | None = None,
    delete_all_versions: bool = True,
) -> Delete:
    cutoff = LATEST_TIMESTAMP if timestamp is None else _timestamp(timestamp)
    row_key = codec.identifier(row)
    if family is None:
        return Delete(row=row_key, timestamp=cutoff)

    if qualifier is None:
        marker = DeleteMarker(DeleteKind.FAMILY, codec.identifier(family), None, cutoff)
    else:
        kind = DeleteKind.COLUMNS if delete_all_versions else DeleteKind.COLUMN
        marker = DeleteMarker(kind, codec.identifier(family), codec.identifier(qualifier), cutoff)
    return Delete(row=row_key, markers=(marker,))


def build_scan(
    codec: ByteArrayConverter,
    family: Identifier | None = None,
    qualifier: Identifier | None = None,
    timestamp: Timestamp | None = None,
    max_timestamp: Timestamp | None = None,
    caching: int | None = None,
    cache_blocks: bool = True,
    max_versions: int = 1,
    start_row: Identifier | None = None,
    stop_row: Identifier | None = None,
) -> Scan:
    """Build a scan request.

    ``timestamp`` alone selects one exact version. Together with
    ``max_timestamp`` it becomes the inclusive lower bound of the range
    ``[timestamp, max_timestamp)``; ``max_timestamp`` alone bounds from zero.
    """
    if max_timestamp is not None:
        lower = 0 if timestamp is None else _timestamp(timestamp)
        time_range = TimeRange(lower, _timestamp(max_timestamp, "max_timestamp"))
    elif timestamp is not None:
        time_range = TimeRange.at(_timestamp(timestamp))
    else:
        time_range = TimeRange()

    return Scan(
        columns=_columns(codec, family, qualifier),
        time_range=time_range,
        caching=None if caching is None else _positive(caching, "caching"),
        cache_blocks=bool(cache_blocks),
        max_versions=_positive(max_versions, "max_versions"),
        start_row=b"" if start_row is None else codec.identifier(start_row),
        stop_row=b"" if stop_row is None else codec.identifier(stop_row),
    )

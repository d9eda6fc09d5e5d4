"""Common type definitions for the HBase client.

Defines the cell model and the enums shared by descriptors and requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Core primitive types
Identifier = str | bytes
Timestamp = int

# Cut-off used when no explicit timestamp is supplied (Long.MAX_VALUE on the wire)
LATEST_TIMESTAMP: Timestamp = 2**63 - 1


@dataclass(frozen=True)
class Cell:
    """A single (row, family, qualifier, timestamp) -> value entry."""

    row: bytes
    family: bytes
    qualifier: bytes
    timestamp: Timestamp
    value: bytes

    def sort_key(self) -> tuple[bytes, bytes, int]:
        """Store order inside a row: family, qualifier, then newest first."""
        return (self.family, self.qualifier, -self.timestamp)


@dataclass(frozen=True)
class TimeRange:
    """Version filter with inclusive lower and exclusive upper bound."""

    min_ts: Timestamp = 0
    max_ts: Timestamp = LATEST_TIMESTAMP

    @classmethod
    def at(cls, ts: Timestamp) -> TimeRange:
        """Range matching exactly one version."""
        return cls(ts, ts + 1)

    def __post_init__(self):
        if self.min_ts < 0 or self.max_ts < self.min_ts:
            raise ValueError(f"Invalid time range: [{self.min_ts}, {self.max_ts})")

    def contains(self, ts: Timestamp) -> bool:
        return self.min_ts <= ts < self.max_ts

    @property
    def is_all_time(self) -> bool:
        return self.min_ts == 0 and self.max_ts == LATEST_TIMESTAMP


class CompressionType(Enum):
    """Compression algorithms a column family can be stored with."""

    NONE = "none"
    GZ = "gz"
    LZO = "lzo"
    SNAPPY = "snappy"
    LZ4 = "lz4"


class BloomFilterType(Enum):
    """Bloom filter kinds a column family can carry."""

    NONE = "NONE"
    ROW = "ROW"
    ROWCOL = "ROWCOL"

"""Table and column family descriptors.

Descriptors are immutable; changes are expressed as a ``ColumnFamilyPatch``
of optional fields and applied with ``apply_patch``, which leaves every field
the patch does not mention untouched.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace

from ..core.types import BloomFilterType, CompressionType

DEFAULT_MAX_VERSIONS = 3
DEFAULT_BLOCK_SIZE = 64 * 1024  # 64 KB
FOREVER = 2**31 - 1  # TTL meaning "never expire"


@dataclass(frozen=True)
class ColumnFamilyDescriptor:
    """Settings of one column family.

    Attributes:
        name: Family name
        max_versions: Versions retained per column
        in_memory: Prefer keeping the family in the block cache
        scope: Replication scope (0 local, 1 global)
        block_size: Storage block size in bytes
        compression: Compression for stored files
        compaction_compression: Compression used while compacting
        time_to_live: Seconds a cell is kept
        block_cache_enabled: Whether reads populate the block cache
        bloom_filter: Bloom filter kind
        values: Arbitrary string metadata
    """

    name: str
    max_versions: int = DEFAULT_MAX_VERSIONS
    in_memory: bool = False
    scope: int = 0
    block_size: int = DEFAULT_BLOCK_SIZE
    compression: CompressionType = CompressionType.NONE
    compaction_compression: CompressionType = CompressionType.NONE
    time_to_live: int = FOREVER
    block_cache_enabled: bool = True
    bloom_filter: BloomFilterType = BloomFilterType.NONE
    values: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.name:
            raise ValueError("Column family name must not be empty")
        for attr in ("max_versions", "block_size", "time_to_live"):
            value = getattr(self, attr)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{attr} must be a positive integer, got {value!r}")
        if self.scope < 0:
            raise ValueError(f"scope must not be negative, got {self.scope}")


@dataclass(frozen=True)
class ColumnFamilyPatch:
    """Optional overrides for a column family; None means "leave as is"."""

    max_versions: int | None = None
    in_memory: bool | None = None
    scope: int | None = None
    block_size: int | None = None
    compression: CompressionType | None = None
    compaction_compression: CompressionType | None = None
    time_to_live: int | None = None
    block_cache_enabled: bool | None = None
    bloom_filter: BloomFilterType | None = None
    values: Mapping[str, str] | None = None

    def supplied(self) -> dict[str, object]:
        """Fields the patch actually sets."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


def apply_patch(descriptor: ColumnFamilyDescriptor, patch: ColumnFamilyPatch) -> ColumnFamilyDescriptor:
    """Return a copy of descriptor with the supplied patch fields laid over it.

    Metadata values are merged key by key rather than replaced.
    """
    changes = patch.supplied()
    if "values" in changes:
        changes["values"] = {**descriptor.values, **{str(k): str(v) for k, v in changes["values"].items()}}
    return replace(descriptor, **changes)


@dataclass(frozen=True)
class TableDescriptor:
    """A table name plus its column families keyed by name."""

    name: str
    families: Mapping[str, ColumnFamilyDescriptor] = field(default_factory=dict)

    def get_family(self, name: str | bytes) -> ColumnFamilyDescriptor | None:
        if isinstance(name, bytes):
            name = name.decode("utf-8")
        return self.families.get(name)

    def has_family(self, name: str | bytes) -> bool:
        return self.get_family(name) is not None

    def with_family(self, descriptor: ColumnFamilyDescriptor) -> TableDescriptor:
        return replace(self, families={**self.families, descriptor.name: descriptor})

    def without_family(self, name: str) -> TableDescriptor:
        return replace(self, families={k: v for k, v in self.families.items() if k != name})

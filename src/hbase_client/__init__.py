"""HBase client - resource-safe access layer for a wide-column store."""

from .components.codec import ByteArrayConverter
from .components.descriptors import ColumnFamilyDescriptor, ColumnFamilyPatch, TableDescriptor, apply_patch
from .components.memory import InMemoryCluster
from .components.result import RowResult
from .components.scanner import ScanIterator, ScanState
from .core.config import HBaseConfig
from .core.errors import (
    HBaseClientError,
    InvalidArgumentError,
    ServiceError,
    StoreError,
    TableExistsError,
    TableNotFoundError,
)
from .core.service import HBaseService
from .core.types import LATEST_TIMESTAMP, BloomFilterType, Cell, CompressionType, TimeRange

__all__ = [
    "ByteArrayConverter",
    "ColumnFamilyDescriptor",
    "ColumnFamilyPatch",
    "TableDescriptor",
    "apply_patch",
    "InMemoryCluster",
    "RowResult",
    "ScanIterator",
    "ScanState",
    "HBaseConfig",
    "HBaseClientError",
    "InvalidArgumentError",
    "ServiceError",
    "StoreError",
    "TableExistsError",
    "TableNotFoundError",
    "HBaseService",
    "LATEST_TIMESTAMP",
    "BloomFilterType",
    "Cell",
    "CompressionType",
    "TimeRange",
]

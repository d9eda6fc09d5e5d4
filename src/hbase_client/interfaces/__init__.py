"""Protocols for the storage engine collaborators."""

from .codec import ByteCodec
from .connection import AdminHandle, ConnectionFactory
from .table import ResultScanner, TableHandle

__all__ = ["ByteCodec", "AdminHandle", "ConnectionFactory", "ResultScanner", "TableHandle"]

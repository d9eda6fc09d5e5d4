"""Default byte codec.

Strings are UTF-8, integers are 8-byte big-endian signed (the layout the
store's atomic counters use), everything else structured goes through JSON.
"""

from __future__ import annotations

import json
import struct
from typing import Any

from ..core.types import Identifier

LONG_FORMAT = ">q"
DOUBLE_FORMAT = ">d"


class ByteArrayConverter:
    """Encode application values and identifiers to bytes.

    Args:
        encoding: Text encoding for str values and identifiers
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def to_bytes(self, value: Any) -> bytes:
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        if isinstance(value, str):
            return value.encode(self.encoding)
        if isinstance(value, bool):
            return b"\x01" if value else b"\x00"
        if isinstance(value, int):
            return struct.pack(LONG_FORMAT, value)
        if isinstance(value, float):
            return struct.pack(DOUBLE_FORMAT, value)
        if value is None:
            raise TypeError("Cannot encode None as a cell value")
        return json.dumps(value, sort_keys=True).encode(self.encoding)

    def identifier(self, name: Identifier) -> bytes:
        """Encode a row key, family or qualifier."""
        if isinstance(name, bytes):
            return name
        return name.encode(self.encoding)


def decode_long(data: bytes) -> int:
    """Decode an 8-byte big-endian signed counter value."""
    if len(data) != 8:
        raise ValueError(f"Counter cell must be 8 bytes wide, got {len(data)}")
    return struct.unpack(LONG_FORMAT, data)[0]


def encode_long(value: int) -> bytes:
    return struct.pack(LONG_FORMAT, value)

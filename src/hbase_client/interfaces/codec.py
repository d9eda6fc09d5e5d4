"""Protocol definition for the byte codec."""

from __future__ import annotations

from typing import Any, Protocol


class ByteCodec(Protocol):
    """Converts application values and identifiers to raw bytes."""

    def to_bytes(self, value: Any) -> bytes:
        """Encode a cell value (str, bytes, int, ...) to bytes."""
        ...

    def identifier(self, name: str | bytes) -> bytes:
        """Encode a row key, family or qualifier."""
        ...

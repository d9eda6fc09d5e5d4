"""Unit tests for the byte codec and the row result carrier."""

import pytest

from hbase_client.components.codec import ByteArrayConverter, decode_long, encode_long
from hbase_client.components.result import RowResult
from hbase_client.core.types import Cell


@pytest.fixture
def codec():
    return ByteArrayConverter()


def test_codec_encodings(codec):
    """Test encoding of the supported value types."""
    assert codec.to_bytes(b"raw") == b"raw"
    assert codec.to_bytes(bytearray(b"ba")) == b"ba"
    assert codec.to_bytes("héllo") == "héllo".encode("utf-8")
    assert codec.to_bytes(True) == b"\x01"
    assert codec.to_bytes(-1) == b"\xff" * 8
    assert len(codec.to_bytes(1.5)) == 8
    assert codec.to_bytes({"b": 1, "a": 2}) == b'{"a": 2, "b": 1}'


def test_codec_rejects_none(codec):
    """Test that None is not a storable value."""
    with pytest.raises(TypeError):
        codec.to_bytes(None)


def test_identifier(codec):
    """Test identifiers are UTF-8 encoded, bytes pass through."""
    assert codec.identifier("row") == b"row"
    assert codec.identifier(b"row") == b"row"


def test_long_helpers():
    """Test counter encoding and the width check."""
    assert decode_long(encode_long(-42)) == -42
    with pytest.raises(ValueError):
        decode_long(b"abc")


@pytest.fixture
def result():
    return RowResult(
        b"r1",
        [
            Cell(b"r1", b"f2", b"q", 5, b"x"),
            Cell(b"r1", b"f1", b"q", 1, b"old"),
            Cell(b"r1", b"f1", b"q", 3, b"new"),
        ],
    )


def test_result_store_order(result):
    """Test cells are ordered by family, qualifier, newest first."""
    assert [(c.family, c.timestamp) for c in result.list()] == [(b"f1", 3), (b"f1", 1), (b"f2", 5)]


def test_result_lookups(result):
    """Test latest-cell lookup and containment."""
    assert result.get_column_latest("f1", "q").value == b"new"
    assert result.get_value(b"f2", b"q") == b"x"
    assert len(result.get_column("f1", "q")) == 2
    assert result.contains_column("f1", "q")
    assert not result.contains_column("f1", "other")
    assert result.families() == [b"f1", b"f2"]


def test_empty_result():
    """Test an empty result answers lookups without failing."""
    empty = RowResult(b"r")

    assert empty.is_empty()
    assert empty.list() == []
    assert empty.get_column_latest("f", "q") is None
    assert not empty.contains_column("f", "q")
    assert len(empty) == 0

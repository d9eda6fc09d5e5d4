"""Unit tests for request builders."""

import pytest

from hbase_client.components.codec import ByteArrayConverter
from hbase_client.components.requests import (
    DeleteKind,
    build_delete,
    build_get,
    build_put,
    build_scan,
    column_selected,
)
from hbase_client.core.types import LATEST_TIMESTAMP, TimeRange


@pytest.fixture
def codec():
    return ByteArrayConverter()


def test_get_defaults_select_everything(codec):
    """Test a bare get reads all families, one version, any time."""
    get = build_get(codec, "r1")

    assert get.row == b"r1"
    assert get.columns == {}
    assert get.max_versions == 1
    assert get.time_range.is_all_time


def test_get_family_only(codec):
    """Test family without qualifier selects the whole family."""
    get = build_get(codec, "r1", "f")
    assert get.columns == {b"f": None}


def test_get_family_and_qualifier(codec):
    """Test qualifier narrows within the family."""
    get = build_get(codec, "r1", "f", "q")
    assert get.columns == {b"f": frozenset([b"q"])}


def test_get_qualifier_without_family_is_ignored(codec):
    """Test a qualifier on its own does not narrow the read."""
    get = build_get(codec, "r1", None, "q")
    assert get.columns == {}


def test_get_timestamp_selects_exact_version(codec):
    """Test a timestamp turns into a one-version range."""
    get = build_get(codec, "r1", timestamp=1000, max_versions=10)

    assert get.time_range == TimeRange(1000, 1001)
    assert get.max_versions == 10


@pytest.mark.parametrize("bad", [0, -1, "3", 2.5, True])
def test_get_rejects_malformed_max_versions(codec, bad):
    """Test malformed version counts are rejected."""
    with pytest.raises(ValueError):
        build_get(codec, "r1", max_versions=bad)


def test_put_without_timestamp_defers_to_store(codec):
    """Test that a missing timestamp is left for the store to assign."""
    put = build_put(codec, "r1", "f", "q", "v", write_to_wal=False)

    assert put.row == b"r1"
    assert put.write_to_wal is False
    (cell,) = put.cells
    assert (cell.family, cell.qualifier, cell.value, cell.timestamp) == (b"f", b"q", b"v", None)


def test_put_pins_timestamp(codec):
    """Test that an explicit timestamp is kept."""
    put = build_put(codec, "r1", "f", "q", 7, timestamp=123)
    assert put.cells[0].timestamp == 123
    assert put.cells[0].value == (7).to_bytes(8, "big")


def test_delete_whole_row(codec):
    """Test neither family nor qualifier deletes the row up to latest."""
    delete = build_delete(codec, "r1")

    assert delete.markers == ()
    assert delete.timestamp == LATEST_TIMESTAMP


def test_delete_family(codec):
    """Test family only deletes the whole family with the cut-off."""
    delete = build_delete(codec, "r1", "f", timestamp=50)

    (marker,) = delete.markers
    assert marker.kind is DeleteKind.FAMILY
    assert marker.family == b"f"
    assert marker.timestamp == 50


@pytest.mark.parametrize(
    "all_versions, kind", [(True, DeleteKind.COLUMNS), (False, DeleteKind.COLUMN)]
)
def test_delete_column_shapes(codec, all_versions, kind):
    """Test delete_all_versions selects between all and one version."""
    delete = build_delete(codec, "r1", "f", "q", delete_all_versions=all_versions)

    (marker,) = delete.markers
    assert marker.kind is kind
    assert marker.qualifier == b"q"
    assert marker.timestamp == LATEST_TIMESTAMP


def test_scan_time_range_is_half_open(codec):
    """Test timestamp plus max_timestamp builds [timestamp, max_timestamp)."""
    scan = build_scan(codec, timestamp=10, max_timestamp=20)

    assert scan.time_range == TimeRange(10, 20)
    assert scan.time_range.contains(10)
    assert not scan.time_range.contains(20)


def test_scan_max_timestamp_alone_bounds_from_zero(codec):
    """Test a lone max_timestamp builds [0, max_timestamp)."""
    scan = build_scan(codec, max_timestamp=20)

    assert scan.time_range == TimeRange(0, 20)
    assert scan.time_range.contains(0)
    assert not scan.time_range.contains(20)


def test_scan_single_timestamp(codec):
    """Test a lone timestamp selects one version."""
    scan = build_scan(codec, timestamp=10)
    assert scan.time_range == TimeRange(10, 11)


def test_scan_rows_and_options(codec):
    """Test start/stop rows and tuning flags are carried over."""
    scan = build_scan(
        codec, family="f", qualifier="q", caching=5, cache_blocks=False,
        max_versions=3, start_row="r2", stop_row="r4",
    )

    assert scan.columns == {b"f": frozenset([b"q"])}
    assert scan.caching == 5
    assert scan.cache_blocks is False
    assert scan.max_versions == 3
    assert (scan.start_row, scan.stop_row) == (b"r2", b"r4")


def test_scan_inverted_time_range_rejected(codec):
    """Test a range whose upper bound precedes the lower one is invalid."""
    with pytest.raises(ValueError):
        build_scan(codec, timestamp=20, max_timestamp=10)


def test_column_selected():
    """Test column selection rules."""
    columns = {b"f1": None, b"f2": frozenset([b"a"])}

    assert column_selected({}, b"any", b"thing")
    assert column_selected(columns, b"f1", b"x")
    assert column_selected(columns, b"f2", b"a")
    assert not column_selected(columns, b"f2", b"b")
    assert not column_selected(columns, b"f3", b"a")

"""Unit tests for column family descriptors and patches."""

import pytest

from hbase_client.components.descriptors import (
    DEFAULT_MAX_VERSIONS,
    ColumnFamilyDescriptor,
    ColumnFamilyPatch,
    TableDescriptor,
    apply_patch,
)
from hbase_client.core.types import BloomFilterType, CompressionType


@pytest.fixture
def descriptor():
    return ColumnFamilyDescriptor(
        "cf",
        max_versions=5,
        in_memory=True,
        block_size=4096,
        compression=CompressionType.LZO,
        values={"owner": "ops"},
    )


def test_defaults():
    """Test descriptor defaults."""
    d = ColumnFamilyDescriptor("cf")

    assert d.max_versions == DEFAULT_MAX_VERSIONS
    assert d.in_memory is False
    assert d.compression is CompressionType.NONE
    assert d.bloom_filter is BloomFilterType.NONE
    assert d.block_cache_enabled is True


def test_empty_patch_changes_nothing(descriptor):
    """Test that applying an empty patch returns an equal descriptor."""
    assert apply_patch(descriptor, ColumnFamilyPatch()) == descriptor


def test_patch_overlays_only_supplied_fields(descriptor):
    """Test that absent fields keep their prior values."""
    patched = apply_patch(
        descriptor,
        ColumnFamilyPatch(max_versions=7, compression=CompressionType.GZ, in_memory=False),
    )

    assert patched.max_versions == 7
    assert patched.compression is CompressionType.GZ
    assert patched.in_memory is False
    assert patched.block_size == 4096
    assert patched.values == {"owner": "ops"}
    assert descriptor.max_versions == 5  # original untouched


def test_patch_merges_metadata(descriptor):
    """Test metadata values are merged key by key."""
    patched = apply_patch(descriptor, ColumnFamilyPatch(values={"tier": "hot"}))
    assert patched.values == {"owner": "ops", "tier": "hot"}


def test_patch_supplied():
    """Test supplied() lists only non-None fields, including falsy ones."""
    patch = ColumnFamilyPatch(in_memory=False, scope=0)
    assert patch.supplied() == {"in_memory": False, "scope": 0}


@pytest.mark.parametrize("field_name", ["max_versions", "block_size", "time_to_live"])
def test_invalid_numbers_rejected(descriptor, field_name):
    """Test non-positive tunables are rejected when applied."""
    with pytest.raises(ValueError):
        apply_patch(descriptor, ColumnFamilyPatch(**{field_name: 0}))


def test_table_descriptor_family_lookup(descriptor):
    """Test family lookup by str or bytes."""
    table = TableDescriptor("t").with_family(descriptor)

    assert table.has_family("cf")
    assert table.get_family(b"cf") is descriptor
    assert not table.without_family("cf").has_family("cf")

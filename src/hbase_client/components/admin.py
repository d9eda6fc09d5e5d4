"""Administrative operations: table and column family lifecycle.

Structural changes pass through the disabled state: the table is disabled,
changed, re-enabled and flushed inside one admin handle.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from ..core.errors import (
    NoSuchColumnFamilyError,
    ServiceError,
    TableNotFoundError,
    degrade_to_bool,
)
from ..core.scope import require_text
from ..core.types import BloomFilterType, CompressionType
from .descriptors import ColumnFamilyDescriptor, ColumnFamilyPatch, TableDescriptor, apply_patch

if TYPE_CHECKING:
    from ..core.scope import ResourceScope
    from ..interfaces.connection import AdminHandle

logger = logging.getLogger(__name__)


class AdminOperations:
    """Table and column family administration on top of a ResourceScope."""

    _scope: ResourceScope

    def alive(self) -> bool:
        """Return True if the coordination and master services answer.

        Any failure to connect or to reach a running master answers False
        instead of raising, whatever the driver raised.
        """
        try:
            return self._scope.with_admin(lambda admin: admin.is_master_running())
        except ServiceError as e:
            logger.debug(f"Cluster not alive: {e}")
            return False

    def create_table(self, name: str) -> None:
        """Create a table without column families."""
        require_text(name, "name")

        def op(admin: AdminHandle) -> None:
            admin.create_table(TableDescriptor(name))
            admin.flush(name)

        self._scope.with_admin(op)
        logger.info(f"Created table {name!r}")

    def exists_table(self, name: str) -> bool:
        require_text(name, "name")
        try:
            return self._scope.with_admin(
                lambda admin: admin.get_table_descriptor(name.encode("utf-8")) is not None
            )
        except ServiceError as e:
            return degrade_to_bool(e, TableNotFoundError)

    def delete_table(self, name: str) -> None:
        """Disable and delete a table."""
        require_text(name, "name")

        def op(admin: AdminHandle) -> None:
            admin.disable_table(name)
            admin.delete_table(name)
            admin.flush(name)

        self._scope.with_admin(op)
        logger.info(f"Deleted table {name!r}")

    def is_disabled_table(self, name: str) -> bool:
        """Return True if the table is disabled; a missing table is not disabled."""
        require_text(name, "name")
        try:
            return self._scope.with_admin(lambda admin: admin.is_table_disabled(name))
        except ServiceError as e:
            return degrade_to_bool(e, TableNotFoundError)

    def enable_table(self, name: str) -> None:
        require_text(name, "name")
        self._scope.with_admin(lambda admin: admin.enable_table(name))
        logger.info(f"Enabled table {name!r}")

    def disable_table(self, name: str) -> None:
        require_text(name, "name")
        self._scope.with_admin(lambda admin: admin.disable_table(name))
        logger.info(f"Disabled table {name!r}")

    def add_column(
        self,
        table_name: str,
        family: str,
        max_versions: int | None = None,
        in_memory: bool | None = None,
        scope: int | None = None,
    ) -> None:
        """Add a column family, setting only the tunables supplied."""
        require_text(table_name, "table_name")
        require_text(family, "family")

        def op(admin: AdminHandle) -> None:
            patch = ColumnFamilyPatch(max_versions=max_versions, in_memory=in_memory, scope=scope)
            descriptor = apply_patch(ColumnFamilyDescriptor(family), patch)
            self._restructure(admin, table_name, lambda: admin.add_column(table_name, descriptor))

        self._scope.with_admin(op)
        logger.info(f"Added column family {family!r} to {table_name!r}")

    def exists_column(self, table_name: str, family: str) -> bool:
        require_text(family, "family")
        return self._scope.with_table(
            table_name, lambda table: table.get_table_descriptor().has_family(family)
        )

    def modify_column(
        self,
        table_name: str,
        family: str,
        max_versions: int | None = None,
        block_size: int | None = None,
        compression: CompressionType | None = None,
        compaction_compression: CompressionType | None = None,
        in_memory: bool | None = None,
        time_to_live: int | None = None,
        block_cache_enabled: bool | None = None,
        bloom_filter: BloomFilterType | None = None,
        scope: int | None = None,
        values: Mapping[str, str] | None = None,
    ) -> None:
        """Overlay the supplied tunables on an existing column family."""
        require_text(table_name, "table_name")
        require_text(family, "family")
        patch = ColumnFamilyPatch(
            max_versions=max_versions,
            in_memory=in_memory,
            scope=scope,
            block_size=block_size,
            compression=compression,
            compaction_compression=compaction_compression,
            time_to_live=time_to_live,
            block_cache_enabled=block_cache_enabled,
            bloom_filter=bloom_filter,
            values=values,
        )

        def op(admin: AdminHandle) -> None:
            current = admin.get_table_descriptor(table_name.encode("utf-8")).get_family(family)
            if current is None:
                raise NoSuchColumnFamilyError(f"Column family {family!r} does not exist in {table_name!r}")
            descriptor = apply_patch(current, patch)
            self._restructure(admin, table_name, lambda: admin.modify_column(table_name, descriptor))

        self._scope.with_admin(op)
        logger.info(f"Modified column family {family!r} of {table_name!r}: {sorted(patch.supplied())}")

    def delete_column(self, table_name: str, family: str) -> None:
        require_text(table_name, "table_name")
        require_text(family, "family")

        def op(admin: AdminHandle) -> None:
            self._restructure(admin, table_name, lambda: admin.delete_column(table_name, family))

        self._scope.with_admin(op)
        logger.info(f"Deleted column family {family!r} from {table_name!r}")

    @staticmethod
    def _restructure(admin: AdminHandle, table_name: str, change) -> None:
        admin.disable_table(table_name)
        change()
        admin.enable_table(table_name)
        admin.flush(table_name)

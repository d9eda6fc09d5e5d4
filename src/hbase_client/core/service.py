"""HBase service - main public API.

Combines admin and row operations over one connection factory.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..components.admin import AdminOperations
from ..components.codec import ByteArrayConverter
from ..components.rows import RowOperations
from .config import HBaseConfig
from .errors import InvalidArgumentError
from .scope import ResourceScope

if TYPE_CHECKING:
    from ..interfaces.codec import ByteCodec
    from ..interfaces.connection import ConnectionFactory

logger = logging.getLogger(__name__)


class HBaseService(AdminOperations, RowOperations):
    """Client access layer for a wide-column store.

    Args:
        factory: Creates admin and table handles
        config: Connection properties and scan defaults
        codec: Value encoder; UTF-8 / big-endian defaults when omitted

    Public API:
        - alive(), create_table(), exists_table(), delete_table()
        - is_disabled_table(), enable_table(), disable_table()
        - add_column(), exists_column(), modify_column(), delete_column()
        - get(), exists(), put(), delete(), scan()
        - increment(), check_and_put(), check_and_delete()
        - add_properties()

    Invariants:
        - Every operation runs inside its own handle, released on every path
        - Only InvalidArgumentError and ServiceError leave the public API
    """

    def __init__(
        self,
        factory: ConnectionFactory,
        config: HBaseConfig | None = None,
        codec: ByteCodec | None = None,
    ):
        if factory is None:
            raise InvalidArgumentError("factory is required")
        self.config = config if config is not None else HBaseConfig()
        self._codec = codec if codec is not None else ByteArrayConverter()
        self._scope = ResourceScope(factory, self.config)
        logger.info(f"Initialized HBase service for quorum {self.config.get('hbase.zookeeper.quorum')}")

    def add_properties(self, properties: Mapping[str, Any]) -> None:
        """Merge connection properties; handles opened afterwards see them."""
        self.config.add_properties(properties)

"""Configuration for the HBase client.

Holds the connection properties handed to every admin and table handle,
plus client-side scan defaults.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_PROPERTIES: dict[str, str] = {
    "hbase.zookeeper.quorum": "127.0.0.1",
    "hbase.zookeeper.property.clientPort": "2181",
    "zookeeper.znode.parent": "/hbase",
}


@dataclass
class HBaseConfig:
    """Connection properties and scan defaults.

    Attributes:
        properties: Key/value settings passed to the connection factory
        scan_fetch_size: Rows fetched per page when a scan omits fetch_size
        scan_max_versions: Versions per column when a scan omits max_versions
    """

    properties: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PROPERTIES))
    scan_fetch_size: int = 50
    scan_max_versions: int = 1

    def add_properties(self, properties: Mapping[str, Any]) -> None:
        """Merge properties in; keys not mentioned keep their values."""
        for key, value in properties.items():
            self.properties[str(key)] = str(value)
        logger.debug(f"Added {len(properties)} connection properties")

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.properties.get(key, default)

    def snapshot(self) -> dict[str, str]:
        """Copy of the properties as they are right now."""
        return dict(self.properties)

    @classmethod
    def from_toml(cls, path: str | Path) -> HBaseConfig:
        """Load a config from a TOML file with [properties] and [scan] tables."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        data = tomllib.loads(path.read_text(encoding="utf-8"))

        config = cls()
        config.add_properties(data.get("properties", {}))
        scan = data.get("scan", {})
        if "fetch_size" in scan:
            config.scan_fetch_size = int(scan["fetch_size"])
        if "max_versions" in scan:
            config.scan_max_versions = int(scan["max_versions"])
        logger.info(f"Loaded client config from {path}")
        return config

"""Row result carrier returned by gets and scans."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from ..core.types import Cell, Identifier


def _key(name: Identifier) -> bytes:
    return name if isinstance(name, bytes) else name.encode("utf-8")


class RowResult:
    """Cells of one row in store order (family, qualifier, newest first).

    An empty result is a valid answer; lookups on it return None or False.
    """

    def __init__(self, row: bytes | None = None, cells: Iterable[Cell] = ()):
        self._cells: list[Cell] = sorted(cells, key=Cell.sort_key)
        if row is None and self._cells:
            row = self._cells[0].row
        self.row = row

    def is_empty(self) -> bool:
        return not self._cells

    def list(self) -> list[Cell]:
        """Flattened copy of every cell."""
        return list(self._cells)

    def get_column(self, family: Identifier, qualifier: Identifier) -> list[Cell]:
        """All returned versions of one column, newest first."""
        fam, qual = _key(family), _key(qualifier)
        return [c for c in self._cells if c.family == fam and c.qualifier == qual]

    def get_column_latest(self, family: Identifier, qualifier: Identifier) -> Cell | None:
        versions = self.get_column(family, qualifier)
        return versions[0] if versions else None

    def get_value(self, family: Identifier, qualifier: Identifier) -> bytes | None:
        """Value of the latest version, or None if the column is absent."""
        latest = self.get_column_latest(family, qualifier)
        return latest.value if latest is not None else None

    def contains_column(self, family: Identifier, qualifier: Identifier) -> bool:
        return self.get_column_latest(family, qualifier) is not None

    def families(self) -> list[bytes]:
        seen: list[bytes] = []
        for cell in self._cells:
            if cell.family not in seen:
                seen.append(cell.family)
        return seen

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __repr__(self) -> str:
        return f"RowResult(row={self.row!r}, cells={len(self._cells)})"

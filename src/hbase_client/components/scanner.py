"""Paginated, lazily fetched scan iterator.

The iterator owns a table handle and the server-side scanner opened on it.
Pages of ``fetch_size`` rows are fetched on demand; a page shorter than
``fetch_size`` is the exhaustion signal, so a range holding an exact multiple
of ``fetch_size`` rows costs one extra, empty fetch.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from ..core.errors import ServiceError

if TYPE_CHECKING:
    from ..interfaces.table import ResultScanner, TableHandle
    from .requests import Scan
    from .result import RowResult

logger = logging.getLogger(__name__)


class ScanState(Enum):
    NOT_STARTED = "not_started"
    HAS_PAGE = "has_page"
    EXHAUSTED = "exhausted"


class ScanIterator:
    """Forward-only, non-restartable iterator over scan results.

    Args:
        table: Open table handle; released when the iterator closes
        scan: Fully built scan request
        fetch_size: Rows per page

    Invariants:
        - Nothing is fetched before the first ``next()``
        - The scanner and the table handle are released exactly once, on
          exhaustion, on ``close()`` or on a fetch failure
        - Once EXHAUSTED, ``next()`` keeps raising StopIteration
    """

    def __init__(self, table: TableHandle, scan: Scan, fetch_size: int):
        self._table = table
        self._scan = scan
        self.fetch_size = fetch_size
        self._scanner: ResultScanner | None = None
        self._page: list[RowResult] = []
        self._pos = 0
        self._closed = False
        self.state = ScanState.NOT_STARTED
        self.pages_fetched = 0

    def __iter__(self) -> ScanIterator:
        return self

    def __next__(self) -> RowResult:
        while True:
            if self.state is ScanState.EXHAUSTED:
                raise StopIteration
            if self.state is ScanState.NOT_STARTED:
                self._fetch_first()
                continue
            if self._pos < len(self._page):
                row = self._page[self._pos]
                self._pos += 1
                return row
            if len(self._page) == self.fetch_size:
                self._fetch_next()
            else:
                self.close()

    def _fetch_first(self) -> None:
        try:
            self._scanner = self._table.get_scanner(self._scan)
        except Exception as e:
            self._abort()
            raise ServiceError("Could not open scanner", cause=e) from e
        self._fetch_next()

    def _fetch_next(self) -> None:
        try:
            page = list(self._scanner.next(self.fetch_size))
        except Exception as e:
            self._abort()
            raise ServiceError(f"Failed to fetch page {self.pages_fetched + 1}", cause=e) from e
        self.pages_fetched += 1
        self._page = page
        self._pos = 0
        self.state = ScanState.HAS_PAGE
        logger.debug(f"Fetched scan page {self.pages_fetched} with {len(page)} rows")

    def close(self) -> None:
        """Release the scanner and the table handle; safe to call repeatedly."""
        self.state = ScanState.EXHAUSTED
        self._page = []
        if self._closed:
            return
        self._closed = True
        errors = []
        for resource in (self._scanner, self._table):
            if resource is None:
                continue
            try:
                resource.close()
            except Exception as e:
                errors.append(e)
        logger.debug(f"Closed scan after {self.pages_fetched} pages")
        if errors:
            raise ServiceError("Failed to close scan resources", cause=errors[0]) from errors[0]

    def _abort(self) -> None:
        try:
            self.close()
        except ServiceError as e:
            logger.warning(f"Ignoring close failure after scan error: {e}")

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> ScanIterator:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

"""Contract between the table controller and whatever serves the rows."""

from __future__ import annotations

from typing import Any, Dict, List, Protocol, Tuple

from lazytable.domain.models import Filter

Entry = Dict[str, Any]
BatchResult = Tuple[List[Entry], int, int]


class TableDataService(Protocol):
    """Asynchronous row source.

    Both calls apply *filter* (column filters and sorter) before indexing, so
    indices always refer to the filtered, sorted dataset.
    """

    async def fetch_batch(self, filter: Filter, start_index: int, end_index: int) -> BatchResult:
        """Return ``(rows[start_index:end_index], filtered_count, total_count)``."""
        ...

    async def fetch_one(self, filter: Filter, index: int) -> Entry:
        """Return the row at *index* of the filtered dataset."""
        ...

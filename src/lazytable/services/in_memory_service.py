"""Table data service backed by an in-memory list of entries."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional, Sequence, Tuple

from lazytable.config import DEFAULT_SIMULATED_FETCH_DELAY
from lazytable.domain.models import Filter, SortState
from lazytable.errors import RowNotFoundError
from lazytable.infrastructure.repositories import RandomRepository
from lazytable.services.data_service import BatchResult, Entry

LOGGER = logging.getLogger(__name__)

_FilterKey = Tuple[Tuple[str, ...], Optional[int], str]


def _sort_key(value: Any) -> tuple:
    # Numbers first, then everything else grouped by type, ``None`` last.
    if value is None:
        return (2, "", 0)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, "", value)
    return (1, type(value).__name__, value)


def apply_filter(entries: Sequence[Entry], filter_: Filter) -> List[Entry]:
    """Return the entries matching *filter_*, sorted by its sorter.

    Column filters match case-insensitively anywhere in the cell text; columns
    are addressed by the key order of the first entry.
    """

    if not entries:
        return []
    keys = list(entries[0].keys())
    result = list(entries)

    for index, column_filter in enumerate(filter_.column_filters):
        if not column_filter or index >= len(keys):
            continue
        key = keys[index]
        needle = column_filter.lower()
        result = [
            entry for entry in result
            if needle in ("" if entry.get(key) is None else str(entry.get(key))).lower()
        ]

    sorter = filter_.column_sorter
    if (
        sorter.state is not SortState.NONE
        and sorter.column is not None
        and 0 <= sorter.column < len(keys)
    ):
        key = keys[sorter.column]
        result.sort(
            key=lambda entry: _sort_key(entry.get(key)),
            reverse=sorter.state is SortState.DESC,
        )
    return result


class InMemoryTableService:
    """Serve rows out of a local list, optionally with artificial latency.

    The filtered and sorted view of the dataset is memoised for the most
    recent filter because single-row requests for one window arrive in bursts.
    """

    def __init__(
        self,
        entries: Sequence[Entry],
        *,
        simulated_fetch_delay: float = 0.0,
    ) -> None:
        self._entries: List[Entry] = list(entries)
        self._delay = simulated_fetch_delay
        self._memo_key: Optional[_FilterKey] = None
        self._memo: List[Entry] = []

    @classmethod
    def random(
        cls,
        size: int,
        *,
        seed: Optional[int] = None,
        simulated_fetch_delay: float = DEFAULT_SIMULATED_FETCH_DELAY,
    ) -> "InMemoryTableService":
        """Create a service hosting *size* randomly generated person entries."""
        return cls(RandomRepository(seed).get_data(size), simulated_fetch_delay=simulated_fetch_delay)

    @property
    def total_size(self) -> int:
        return len(self._entries)

    def filtered(self, filter_: Filter) -> List[Entry]:
        key: _FilterKey = (
            tuple(filter_.column_filters),
            filter_.column_sorter.column,
            filter_.column_sorter.state.value,
        )
        if key != self._memo_key:
            self._memo = apply_filter(self._entries, filter_)
            self._memo_key = key
        return self._memo

    async def fetch_batch(self, filter: Filter, start_index: int, end_index: int) -> BatchResult:
        await self._simulate_latency()
        filtered = self.filtered(filter)
        LOGGER.debug(
            "Serving batch [%d, %d) of %d filtered rows", start_index, end_index, len(filtered)
        )
        return list(filtered[start_index:end_index]), len(filtered), len(self._entries)

    async def fetch_one(self, filter: Filter, index: int) -> Entry:
        await self._simulate_latency()
        filtered = self.filtered(filter)
        if not 0 <= index < len(filtered):
            raise RowNotFoundError(f"Row {index} is outside the filtered dataset ({len(filtered)} rows)")
        return filtered[index]

    async def _simulate_latency(self) -> None:
        if self._delay > 0:
            await asyncio.sleep(self._delay)

"""Windowing controller for lazily loaded tables (pure Python, no Qt dependency).

Maps scroll positions to a bounded window of rendered rows, keeps the row
cache of the :class:`TablePresentationModel` filled for that window and
maintains the spacer geometry (prefill/postfill) around it.

All methods run on the asyncio event loop thread.  Data requests are
scheduled as tasks on the running loop; their completions are applied one at
a time as the loop delivers them.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, Callable, Coroutine, List, Optional

from lazytable.config import CACHE_EVICTION_MARGIN, PREFETCH_MULTIPLIER
from lazytable.domain.models import Filter, SortState
from lazytable.services.data_service import TableDataService
from lazytable.utils.numbers import is_number, positive_number, px_mapper
from lazytable.viewmodels.presentation_model import TablePresentationModel
from lazytable.viewmodels.signal import Signal

LOGGER = logging.getLogger(__name__)


class TableController:
    """Drive a :class:`TablePresentationModel` from scroll and input events."""

    def __init__(self, model: TablePresentationModel, service: TableDataService) -> None:
        self._model = model
        self._service = service

        self._ignore_scroll_event = False
        self._current_scroll_index: Optional[int] = None
        self._is_initial_filter_change = True
        self._last_queried_filter: Optional[Filter] = None
        self._pending: set[asyncio.Task] = set()

        # Emits the postfill height after every cache reset.
        self.data_reset = Signal()

        self._subscriptions: list[Callable[[], None]] = [
            model.filter.on_change(self._on_filter_changed),
            model.number_of_visible_rows.on_change(self._on_visible_rows_changed),
            model.rows.on_reset(self._on_data_init),
        ]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def init(self) -> None:
        """Fetch the first batch of rows for the configured filter."""
        self.get_filtered_data()

    async def wait_idle(self) -> None:
        """Wait until no fetch is in flight, including follow-up fetches."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def dispose(self) -> None:
        """Cancel in-flight fetches and detach from the model."""
        for task in list(self._pending):
            task.cancel()
        self._pending.clear()
        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions.clear()

    @property
    def pending_requests(self) -> int:
        return len(self._pending)

    # ------------------------------------------------------------------
    # Data loading
    # ------------------------------------------------------------------
    def get_filtered_data(self) -> None:
        """Re-query a batch ahead of the window for the current filter.

        Size, entry keys and the row cache are replaced once the batch arrives.
        """
        filter_ = self._model.filter.value
        self._last_queried_filter = filter_
        start_index = self._model.scroll_index.value
        end_index = start_index + PREFETCH_MULTIPLIER * self._model.number_of_rendered_rows.value
        self._schedule(self._load_batch, filter_, start_index, end_index)

    def update_data(self) -> None:
        """Request every row of the rendered window that is not cached yet."""
        self._evict_cache()
        model = self._model
        filter_ = model.filter.value
        first_row = model.scroll_index.value
        last_row = first_row + model.number_of_rendered_rows.value
        data_set_size = model.current_data_set_size.value
        for row_index in range(first_row, min(last_row, data_set_size)):
            if not model.has_entry(row_index):
                self._schedule(self._load_row, filter_, row_index)

    async def _load_batch(self, filter_: Filter, start_index: int, end_index: int) -> None:
        try:
            rows, current_data_set_size, total_data_size = await self._service.fetch_batch(
                filter_, start_index, end_index
            )
        except Exception as exc:
            LOGGER.error("The following error occurred while updating table data: %s", exc)
            return

        model = self._model
        model.total_data_size.value = total_data_size
        model.current_data_set_size.value = current_data_set_size
        if rows:
            keys = list(rows[0].keys())
            if keys != model.entry_keys.value:
                model.entry_keys.value = keys
            self._fit_filter_to_keys(filter_, len(keys))
        LOGGER.debug(
            "Batch [%d, %d) delivered %d rows (%d filtered / %d total)",
            start_index, end_index, len(rows), current_data_set_size, total_data_size,
        )
        model.rows.reset(start_index, rows)

    def _fit_filter_to_keys(self, queried_filter: Filter, key_count: int) -> None:
        model = self._model
        current = model.filter.value
        # A newer filter is already being queried; its own batch fits it.
        if current is not queried_filter or len(current.column_filters) >= key_count:
            return
        padded = current.with_column_count(key_count)
        LOGGER.debug("Padding filter from %d to %d columns", len(current.column_filters), key_count)
        # Empty padding does not change the result set, so no re-query.
        self._last_queried_filter = padded
        model.filter.value = padded

    async def _load_row(self, filter_: Filter, row_index: int) -> None:
        try:
            entry = await self._service.fetch_one(filter_, row_index)
        except Exception as exc:
            LOGGER.error(
                "The following error occurred while updating the data of table row %d: %s",
                row_index, exc,
            )
            return
        self._model.rows.insert(row_index, entry)

    def _schedule(self, factory: Callable[..., Coroutine[Any, Any, None]], *args: Any) -> None:
        loop = asyncio.get_running_loop()
        task = loop.create_task(factory(*args))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _evict_cache(self) -> None:
        model = self._model
        if model.data_size() > model.number_of_rendered_rows.value + CACHE_EVICTION_MARGIN:
            LOGGER.debug("Row cache holds %d rows, clearing it", model.data_size())
            model.clear_data()

    # ------------------------------------------------------------------
    # Model callbacks
    # ------------------------------------------------------------------
    def _on_filter_changed(self, new_filter: Filter, _old_filter: Filter) -> None:
        if self._is_initial_filter_change:
            self._is_initial_filter_change = False
            return
        if new_filter is self._last_queried_filter:
            LOGGER.debug("Filter object unchanged, skipping re-query")
            return
        self.get_filtered_data()

    def _on_visible_rows_changed(self, visible_rows: int, _old: int) -> None:
        self._model.viewport_height.value = visible_rows * self._model.row_height.value

    def _on_data_init(self, _rows: dict) -> None:
        model = self._model
        scroll_index = self._sanitize_scroll_index(model.scroll_index.value)
        if scroll_index != model.scroll_index.value:
            self._set_scroll_top(scroll_index * model.row_height.value)
            model.scroll_index.value = scroll_index
        # The next scroll event must rebuild the window even at the same index.
        self._current_scroll_index = None
        self._update_number_of_rendered_rows()
        self._reset_postfill_size()
        self.data_reset.emit(model.postfill_height.value)

    def _update_number_of_rendered_rows(self) -> None:
        model = self._model
        visible_rows = model.number_of_visible_rows.value
        extra_row = 1 if model.current_data_set_size.value > visible_rows else 0
        model.number_of_rendered_rows.value = visible_rows + extra_row

    def _reset_postfill_size(self) -> None:
        model = self._model
        row_height = model.row_height.value
        model.prefill_height.value = 0
        model.postfill_initial_height.value = positive_number(
            row_height * model.current_data_set_size.value
            - row_height * model.number_of_rendered_rows.value
        )
        model.postfill_height.value = model.postfill_initial_height.value

    # ------------------------------------------------------------------
    # Scrolling
    # ------------------------------------------------------------------
    def scroll_top_changed(self, scroll_top: float) -> None:
        """Handle a raw scroll position reported by the viewport."""
        # Our own scroll_top writes echo back through the view; drop them.
        if self._ignore_scroll_event:
            return
        self._ignore_scroll_event = True
        try:
            model = self._model
            row_height = model.row_height.value
            scroll_top_limit = (
                model.current_data_set_size.value * row_height
                - model.number_of_rendered_rows.value * row_height
            )
            scroll_top = max(0, min(scroll_top, scroll_top_limit))
            model.scroll_top.value = scroll_top

            # (scroll_index) 3 = (scroll_top) 180 / (row_height) 60
            scroll_index = math.floor(scroll_top / row_height)
            if scroll_index == self._current_scroll_index:
                return
            self._current_scroll_index = scroll_index
            self._update_scroll_index(scroll_index, is_external_change=False)
        finally:
            self._ignore_scroll_event = False

    def update_scroll_index(self, index: Any) -> None:
        """Jump the window to *index* (e.g. "go to row 42")."""
        self._update_scroll_index(index, is_external_change=True)

    def _update_scroll_index(self, index: Any, *, is_external_change: bool) -> None:
        index = self._sanitize_scroll_index(index)
        model = self._model
        row_height = model.row_height.value

        if is_external_change:
            self._set_scroll_top(index * row_height)
            self._current_scroll_index = index

        prefill_height = index * row_height
        model.prefill_height.value = prefill_height
        model.postfill_height.value = positive_number(
            model.postfill_initial_height.value - prefill_height
        )

        model.scroll_index.value = index
        self.update_data()

    def _set_scroll_top(self, scroll_top: float) -> None:
        previous = self._ignore_scroll_event
        self._ignore_scroll_event = True
        try:
            self._model.scroll_top.value = scroll_top
        finally:
            self._ignore_scroll_event = previous

    def _sanitize_scroll_index(self, index: Any) -> int:
        if not is_number(index) or not math.isfinite(index):
            LOGGER.warning("invalid ScrollIndex: %r", index)
            return 0
        if index % 1 != 0:
            LOGGER.warning("invalid ScrollIndex: %r", index)
            index = math.floor(index + 0.5)
        if index < 0:
            LOGGER.warning("invalid ScrollIndex: %r", index)
            return 0
        data_set_size = self._model.current_data_set_size.value
        if data_set_size > 0 and index >= data_set_size:
            LOGGER.warning("invalid ScrollIndex: %r", index)
            return 0
        return int(index)

    # ------------------------------------------------------------------
    # Cells, filters and columns
    # ------------------------------------------------------------------
    def get_entry_value_by_index_and_key(self, row_index: Any, column_index: Any) -> Any:
        """Return the value of one cell, or ``""`` when it is unknown.

        >>> controller.get_entry_value_by_index_and_key(3, 1)
        'Hans Muster'
        """
        keys = self._model.entry_keys.value
        if not self._is_valid_column_index(column_index, len(keys)):
            LOGGER.warning("invalid column index in get_entry_value_by_index_and_key: %r", column_index)
            return ""
        try:
            entry = self._model.get_single_data_entry(row_index)
        except TypeError as exc:
            LOGGER.warning("Error in get_entry_value_by_index_and_key: %s", exc)
            return ""
        if entry is None:
            return ""
        value = entry.get(keys[int(column_index)])
        return "" if value is None else value

    def set_column_filter(self, column_index: Any, query_value: Any) -> None:
        """Replace the filter text of one column (stored lower-cased)."""
        if not self._is_valid_column_index(column_index, self.keys_length):
            LOGGER.warning(
                "received invalid columnIndex in set_column_filter: %r -> filter does not change instead",
                column_index,
            )
            return
        current = self._model.filter.value
        self._model.filter.value = current.with_column_filter(int(column_index), str(query_value).lower())

    def set_column_sorter(self, column_index: Any, state: Any) -> None:
        """Sort by one column; ``state`` is ``"asc"``, ``"desc"`` or ``""``."""
        if not self._is_valid_column_index(column_index, self.keys_length):
            LOGGER.warning(
                "received invalid columnIndex in set_column_sorter: %r -> was instead set to 0",
                column_index,
            )
            column_index = 0
        sort_state = SortState.parse(state)
        if sort_state is None:
            LOGGER.warning(
                "received invalid state in set_column_sorter: %r -> was instead set to \"\"", state
            )
            sort_state = SortState.NONE
        current = self._model.filter.value
        self._model.filter.value = current.with_sorter(int(column_index), sort_state)

    def set_column_widths(self, column_index: Any, column_width: int | float) -> None:
        """Resize one column, taking the difference from its right neighbour."""
        old_widths = self._model.column_widths.value
        if not self._is_valid_column_index(column_index, len(old_widths)):
            LOGGER.warning("received invalid columnIndex in set_column_widths: %r", column_index)
            return
        index = int(column_index)
        new_widths = list(old_widths)
        new_widths[index] = column_width
        if index + 1 < len(new_widths):
            new_widths[index + 1] = old_widths[index + 1] + (old_widths[index] - column_width)
        self._model.column_widths.value = new_widths

    def set_number_of_visible_rows(self, visible_rows: int) -> None:
        """Change the viewport capacity and refill the window."""
        model = self._model
        model.number_of_visible_rows.value = visible_rows
        self._update_number_of_rendered_rows()
        row_height = model.row_height.value
        model.postfill_initial_height.value = positive_number(
            row_height * model.current_data_set_size.value
            - row_height * model.number_of_rendered_rows.value
        )
        model.postfill_height.value = positive_number(
            model.postfill_initial_height.value - model.prefill_height.value
        )
        if model.current_data_set_size.value > 0:
            self.update_data()

    def get_rendered_rows_count(self) -> int:
        """Return how many rows of the window can be filled from the cache."""
        return min(self._model.data_size(), self._model.number_of_visible_rows.value)

    @staticmethod
    def _is_valid_column_index(column_index: Any, column_count: int) -> bool:
        if not is_number(column_index) or column_index % 1 != 0:
            return False
        return 0 <= column_index < column_count

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------
    @property
    def filter(self) -> Filter:
        return self._model.filter.value

    @property
    def entry_keys(self) -> List[str]:
        return self._model.entry_keys.value

    @property
    def keys_length(self) -> int:
        return len(self._model.entry_keys.value)

    def has_data_entry(self, index: int) -> bool:
        return self._model.has_entry(index)

    @property
    def total_data_size(self) -> int:
        return self._model.total_data_size.value

    @property
    def current_data_set_size(self) -> int:
        return self._model.current_data_set_size.value

    @property
    def scroll_index(self) -> int:
        return self._model.scroll_index.value

    @property
    def scroll_top(self) -> float:
        return self._model.scroll_top.value

    @property
    def column_widths(self) -> List[str]:
        return px_mapper(self._model.column_widths.value)

    @property
    def prefill_height(self) -> float:
        return self._model.prefill_height.value

    @property
    def postfill_initial_height(self) -> float:
        return self._model.postfill_initial_height.value

    @property
    def postfill_height(self) -> float:
        return self._model.postfill_height.value

    @property
    def number_of_rendered_rows(self) -> int:
        return self._model.number_of_rendered_rows.value

    @property
    def number_of_visible_rows(self) -> int:
        return self._model.number_of_visible_rows.value

    @property
    def row_height(self) -> int:
        return self._model.row_height.value

    @property
    def viewport_height(self) -> float:
        return self._model.viewport_height.value

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------
    def on_data_reset(self, handler: Callable[[float], Any]) -> Callable[[], None]:
        return self.data_reset.connect(handler)

    def on_data_changed(self, handler: Callable[[int, Any], Any]) -> Callable[[], None]:
        return self._model.rows.on_change(handler)

    def on_filter_changed(self, handler: Callable) -> Callable[[], None]:
        return self._model.filter.on_change(handler)

    def on_entry_keys_changed(self, handler: Callable) -> Callable[[], None]:
        return self._model.entry_keys.on_change(handler)

    def on_scroll_index_changed(self, handler: Callable) -> Callable[[], None]:
        return self._model.scroll_index.on_change(handler)

    def on_number_of_rendered_rows_changed(self, handler: Callable) -> Callable[[], None]:
        return self._model.number_of_rendered_rows.on_change(handler)

    def on_viewport_height_changed(self, handler: Callable) -> Callable[[], None]:
        return self._model.viewport_height.on_change(handler)

    def on_scroll_top_changed(self, handler: Callable) -> Callable[[], None]:
        return self._model.scroll_top.on_change(handler)

    def on_number_of_visible_rows_changed(self, handler: Callable) -> Callable[[], None]:
        return self._model.number_of_visible_rows.on_change(handler)

    def on_column_widths_changed(self, handler: Callable) -> Callable[[], None]:
        return self._model.column_widths.on_change(handler)

"""Presentation state of one lazily loaded table (pure Python, no Qt dependency).

The model only stores values and notifies subscribers; every rule about how
those values relate to each other lives in
:class:`~lazytable.viewmodels.table_controller.TableController`.
"""

from __future__ import annotations

from typing import Any, Dict, List

from lazytable.domain.models import Filter, TableConfig
from lazytable.viewmodels.row_cache import RowCache
from lazytable.viewmodels.signal import ObservableProperty


class TablePresentationModel:
    """Observable table state, constructed once per table instance."""

    def __init__(self, config: TableConfig) -> None:
        self.rows = RowCache()

        # Dataset
        self.total_data_size: ObservableProperty[int] = ObservableProperty(0)
        self.current_data_set_size: ObservableProperty[int] = ObservableProperty(0)
        self.entry_keys: ObservableProperty[List[str]] = ObservableProperty([])
        self.filter: ObservableProperty[Filter] = ObservableProperty(config.filter)

        # Window position
        self.scroll_index: ObservableProperty[int] = ObservableProperty(0)
        self.scroll_top: ObservableProperty[float] = ObservableProperty(0)

        # Geometry
        self.prefill_height: ObservableProperty[float] = ObservableProperty(0)
        self.postfill_initial_height: ObservableProperty[float] = ObservableProperty(0)
        self.postfill_height: ObservableProperty[float] = ObservableProperty(0)
        self.viewport_height: ObservableProperty[float] = ObservableProperty(0)
        self.row_height: ObservableProperty[int] = ObservableProperty(config.row_height)
        self.number_of_visible_rows: ObservableProperty[int] = ObservableProperty(
            config.number_of_visible_rows
        )
        self.number_of_rendered_rows: ObservableProperty[int] = ObservableProperty(
            config.number_of_visible_rows + 1
        )
        self.column_widths: ObservableProperty[List[Any]] = ObservableProperty(
            list(config.column_widths)
        )

    # -- row cache shortcuts -------------------------------------------------

    def get_single_data_entry(self, index: int) -> Dict[str, Any] | None:
        return self.rows.get(index)

    def has_entry(self, index: int) -> bool:
        return self.rows.has(index)

    def data_size(self) -> int:
        return self.rows.size()

    def clear_data(self) -> None:
        self.rows.clear()

"""Qt table model exposing the rendered window of a :class:`TableController`."""

from __future__ import annotations

import logging
from typing import Any, Callable, List

from PySide6.QtCore import QAbstractTableModel, QModelIndex, QObject, Qt

from ..viewmodels.table_controller import TableController

logger = logging.getLogger(__name__)


class VirtualTableModel(QAbstractTableModel):
    """Present the controller's rendered rows to Qt item views.

    Model row ``r`` maps to the absolute row ``scroll_index + r`` of the
    filtered dataset.  Rows whose data has not arrived yet render as empty
    cells and are refreshed through ``dataChanged`` once the backfill lands.
    """

    def __init__(self, controller: TableController, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._controller = controller
        self._subscriptions: List[Callable[[], None]] = [
            controller.on_data_reset(self._on_structure_changed),
            controller.on_entry_keys_changed(self._on_structure_changed),
            controller.on_scroll_index_changed(self._on_structure_changed),
            controller.on_number_of_rendered_rows_changed(self._on_structure_changed),
            controller.on_data_changed(self._on_row_changed),
        ]

    def dispose(self) -> None:
        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions.clear()

    # ------------------------------------------------------------------
    # QAbstractTableModel overrides
    # ------------------------------------------------------------------
    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:  # noqa: N802
        if parent.isValid():
            return 0
        controller = self._controller
        remaining = controller.current_data_set_size - controller.scroll_index
        return max(0, min(controller.number_of_rendered_rows, remaining))

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:  # noqa: N802
        if parent.isValid():
            return 0
        return self._controller.keys_length

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid() or role != Qt.ItemDataRole.DisplayRole:
            return None
        absolute_row = self._controller.scroll_index + index.row()
        value = self._controller.get_entry_value_by_index_and_key(absolute_row, index.column())
        return str(value)

    def headerData(  # noqa: N802
        self,
        section: int,
        orientation: Qt.Orientation,
        role: int = Qt.ItemDataRole.DisplayRole,
    ) -> Any:
        if role != Qt.ItemDataRole.DisplayRole:
            return None
        if orientation == Qt.Orientation.Horizontal:
            keys = self._controller.entry_keys
            return keys[section] if 0 <= section < len(keys) else None
        return str(self._controller.scroll_index + section + 1)

    # ------------------------------------------------------------------
    # Controller callbacks
    # ------------------------------------------------------------------
    def _on_structure_changed(self, *_args: Any) -> None:
        self.beginResetModel()
        self.endResetModel()

    def _on_row_changed(self, absolute_row: int, _entry: Any) -> None:
        row = absolute_row - self._controller.scroll_index
        if not 0 <= row < self.rowCount():
            logger.debug("Row %d arrived outside the rendered window", absolute_row)
            return
        last_column = max(0, self.columnCount() - 1)
        self.dataChanged.emit(self.index(row, 0), self.index(row, last_column))

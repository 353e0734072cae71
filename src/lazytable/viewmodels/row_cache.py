"""Sparse, observable cache of table rows keyed by absolute row index."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Optional

from .signal import Signal

Entry = Dict[str, Any]


class RowCache:
    """Map absolute indices of the *filtered* dataset to row entries.

    Every mutation is applied before its notifications fire, so handlers may
    query the cache and observe the new state.  Channels:

    * ``reset(mapping)`` after :meth:`reset`
    * ``inserted(index, entry)`` after :meth:`insert`
    * ``deleted(index, entry)`` after :meth:`remove`
    * ``changed(index, entry)`` after :meth:`insert` and :meth:`remove`
    * ``cleared()`` after :meth:`clear`
    """

    def __init__(self) -> None:
        self._rows: dict[int, Entry] = {}
        self.reset_signal = Signal()
        self.inserted = Signal()
        self.deleted = Signal()
        self.changed = Signal()
        self.cleared = Signal()

    # -- mutations ---------------------------------------------------------

    def reset(self, start_index: int, entries: Iterable[Entry]) -> None:
        """Replace the whole cache with *entries* stored from *start_index* on."""
        self._rows.clear()
        for offset, entry in enumerate(entries):
            self._rows[start_index + offset] = entry
        self.reset_signal.emit(self._rows)

    def insert(self, index: int, entry: Entry) -> None:
        self._rows[index] = entry
        self.inserted.emit(index, entry)
        self.changed.emit(index, entry)

    def remove(self, index: int) -> None:
        entry = self._rows.pop(index, None)
        self.deleted.emit(index, entry)
        self.changed.emit(index, entry)

    def clear(self) -> None:
        self._rows.clear()
        self.cleared.emit()

    # -- queries -----------------------------------------------------------

    def has(self, index: int) -> bool:
        return index in self._rows

    def get(self, index: int) -> Optional[Entry]:
        return self._rows.get(index)

    def size(self) -> int:
        return len(self._rows)

    def snapshot(self) -> dict[int, Entry]:
        """Return a shallow copy of the current mapping."""
        return dict(self._rows)

    def __contains__(self, index: object) -> bool:
        return index in self._rows

    def __len__(self) -> int:
        return len(self._rows)

    # -- subscriptions -----------------------------------------------------

    def on_reset(self, handler: Callable[[dict[int, Entry]], Any]) -> Callable[[], None]:
        return self.reset_signal.connect(handler)

    def on_insert(self, handler: Callable[[int, Entry], Any]) -> Callable[[], None]:
        return self.inserted.connect(handler)

    def on_delete(self, handler: Callable[[int, Optional[Entry]], Any]) -> Callable[[], None]:
        return self.deleted.connect(handler)

    def on_change(self, handler: Callable[[int, Optional[Entry]], Any]) -> Callable[[], None]:
        return self.changed.connect(handler)

    def on_clear(self, handler: Callable[[], Any]) -> Callable[[], None]:
        return self.cleared.connect(handler)

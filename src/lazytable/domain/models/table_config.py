from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ...config import (
    DEFAULT_ROW_HEIGHT,
    DEFAULT_SIMULATED_FETCH_DELAY,
    DEFAULT_VISIBLE_ROWS,
)
from .filter import Filter


@dataclass
class TableConfig:
    """Construction parameters of one table instance.

    Values are taken as given; nothing here rejects odd input.  File based
    configuration goes through :mod:`lazytable.settings` which validates.
    """

    row_height: int = DEFAULT_ROW_HEIGHT
    number_of_visible_rows: int = DEFAULT_VISIBLE_ROWS
    filter: Filter = field(default_factory=Filter)
    column_widths: List[int] = field(default_factory=list)
    simulated_fetch_delay: float = DEFAULT_SIMULATED_FETCH_DELAY

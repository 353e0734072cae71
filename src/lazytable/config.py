"""Default configuration values for lazytable."""

from __future__ import annotations

from typing import Final

DEFAULT_ROW_HEIGHT: Final[int] = 60
DEFAULT_VISIBLE_ROWS: Final[int] = 8

# The row cache is dropped entirely once it holds this many rows more than the
# rendered window needs.
CACHE_EVICTION_MARGIN: Final[int] = 100

# A filter/sort re-query fetches this many windows worth of rows up front.
PREFETCH_MULTIPLIER: Final[int] = 3

# Artificial latency of the demo services, in seconds.
DEFAULT_SIMULATED_FETCH_DELAY: Final[float] = 0.8

DEFAULT_DEMO_ROWS: Final[int] = 100
# One width per field of the demo dataset (id, name, age, age2..age5, city).
DEMO_COLUMN_WIDTHS: Final[tuple[int, ...]] = (150, 560, 250, 150, 560, 250, 560, 540)
DEMO_CITIES: Final[tuple[str, ...]] = ("Tokyo", "Osaka", "Kyoto", "Kobe", "Nagano")
DEMO_NAME_CHARACTERS: Final[str] = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
)

HTTP_TIMEOUT_SEC: Final[float] = 10.0

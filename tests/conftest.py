"""Shared fixtures for the lazytable test-suite."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from lazytable.domain.models import Filter, TableConfig  # noqa: E402
from lazytable.services import InMemoryTableService  # noqa: E402
from lazytable.viewmodels import TableController, TablePresentationModel  # noqa: E402

CITIES = ["Tokyo", "Osaka", "Kyoto", "Kobe", "Nagano"]
COUNTRIES = ["Japan", "United Kingdom", "United States", "Switzerland"]
KEYS = ["id", "name", "age", "city", "email", "country"]


def make_people(count: int) -> List[Dict[str, Any]]:
    """Return *count* deterministic person entries with six fields."""
    return [
        {
            "id": index + 1,
            "name": f"Person {index + 1}",
            "age": 20 + index % 50,
            "city": CITIES[index % len(CITIES)],
            "email": f"person{index + 1}@example.com",
            "country": COUNTRIES[index % len(COUNTRIES)],
        }
        for index in range(count)
    ]


class RecordingService(InMemoryTableService):
    """In-memory service that records every request it receives."""

    def __init__(self, entries, **kwargs) -> None:
        super().__init__(entries, **kwargs)
        self.batch_calls: List[tuple] = []
        self.row_calls: List[tuple] = []

    async def fetch_batch(self, filter, start_index, end_index):
        self.batch_calls.append((filter, start_index, end_index))
        return await super().fetch_batch(filter, start_index, end_index)

    async def fetch_one(self, filter, index):
        self.row_calls.append((filter, index))
        return await super().fetch_one(filter, index)


def build_table(
    rows: int = 100,
    *,
    visible_rows: int = 8,
    row_height: int = 60,
    column_widths: Optional[List[int]] = None,
    service: Any = None,
):
    """Create ``(controller, model, service)`` for a table of *rows* people."""
    config = TableConfig(
        row_height=row_height,
        number_of_visible_rows=visible_rows,
        filter=Filter.empty(len(KEYS)),
        column_widths=column_widths if column_widths is not None else [100, 200, 300, 400],
        simulated_fetch_delay=0.0,
    )
    if service is None:
        service = RecordingService(make_people(rows))
    model = TablePresentationModel(config)
    controller = TableController(model, service)
    return controller, model, service


async def loaded_table(rows: int = 100, **kwargs):
    """Build a table inside the running loop and wait for the first batch."""
    controller, model, service = build_table(rows, **kwargs)
    controller.init()
    await controller.wait_idle()
    return controller, model, service


@pytest.fixture
def run():
    """Run a coroutine to completion on a fresh event loop."""

    def _run(coro):
        return asyncio.run(coro)

    return _run

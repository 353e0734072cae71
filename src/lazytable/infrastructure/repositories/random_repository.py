"""Randomised person records used by the demo and the tests."""

from __future__ import annotations

import random
from typing import Any, Dict, List, Optional

from lazytable.config import DEMO_CITIES, DEMO_NAME_CHARACTERS
from lazytable.utils.numbers import random_number, random_string


class RandomRepository:
    """Generate a dataset of person entries with a fixed field order.

    Passing a *seed* makes the generated data reproducible.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def get_data(self, size: int) -> List[Dict[str, Any]]:
        rng = self._rng
        entries: List[Dict[str, Any]] = []
        for index in range(size):
            entries.append(
                {
                    "id": index + 1,
                    "name": random_string(DEMO_NAME_CHARACTERS, random_number(3, 13, rng), rng),
                    "age": random_number(1, 80, rng),
                    "age2": random_number(1, 80, rng),
                    "age3": random_number(1, 80, rng),
                    "age4": random_number(1, 80, rng),
                    "age5": random_number(1, 80, rng),
                    "city": rng.choice(DEMO_CITIES),
                }
            )
        return entries

"""Numeric and string helpers shared by the controller and the demo services."""

from __future__ import annotations

import math
import random
from typing import Iterable


def positive_number(value: object) -> float | int:
    """Return *value* as a number, with negative values clamped to ``0``.

    Ints and floats are passed through unchanged; strings are parsed.  Anything
    that does not denote a number raises :class:`TypeError` since it signals a
    bug in the caller rather than bad user input.
    """

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = value
    else:
        try:
            number = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise TypeError(f"Object {value!r} is not a valid number.") from exc
    if isinstance(number, float) and math.isnan(number):
        raise TypeError(f"Object {value!r} is not a valid number.")
    return 0 if number < 0 else number


def random_number(minimum: int, maximum: int, rng: random.Random | None = None) -> int:
    """Return a random integer in ``[minimum, maximum]``."""

    return (rng or random).randint(minimum, maximum)


def random_string(characters: str, length: object, rng: random.Random | None = None) -> str:
    """Return a string of *length* characters drawn from *characters*."""

    if not isinstance(characters, str):
        raise TypeError(f"Object {characters!r} is not a valid string.")
    count = int(positive_number(length))
    source = rng or random
    return "".join(source.choice(characters) for _ in range(count))


def px_mapper(values: Iterable[object]) -> list[str]:
    """Suffix every value with ``px``."""

    return [f"{value}px" for value in values]


def add_thousands_separator(number: int) -> str:
    """Format *number* with ``'`` as the thousands separator (``1'234``)."""

    return f"{number:,}".replace(",", "'")


def is_number(value: object) -> bool:
    """Return ``True`` for real numbers that are not NaN (bools excluded)."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


"""Tests for the numeric helpers."""

import math
import random

import pytest

from lazytable.utils.numbers import (
    add_thousands_separator,
    is_number,
    positive_number,
    px_mapper,
    random_number,
    random_string,
)


class TestPositiveNumber:
    @pytest.mark.parametrize(
        "value, expected",
        [(5, 5), (0, 0), (-3, 0), (2.5, 2.5), (-0.1, 0), ("12", 12.0), ("-4", 0)],
    )
    def test_clamps_negative_values(self, value, expected):
        assert positive_number(value) == expected

    @pytest.mark.parametrize("value", ["abc", None, [1], float("nan"), "nan"])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(TypeError):
            positive_number(value)


class TestIsNumber:
    def test_accepts_real_numbers(self):
        assert is_number(3)
        assert is_number(-2.5)
        assert is_number(math.inf)

    @pytest.mark.parametrize("value", [True, False, None, "1", float("nan"), [1]])
    def test_rejects_everything_else(self, value):
        assert not is_number(value)


def test_px_mapper():
    assert px_mapper([100, 12.5, 0]) == ["100px", "12.5px", "0px"]
    assert px_mapper([]) == []


def test_add_thousands_separator():
    assert add_thousands_separator(999) == "999"
    assert add_thousands_separator(1234) == "1'234"
    assert add_thousands_separator(1234567) == "1'234'567"


class TestRandom:
    def test_random_number_bounds(self):
        rng = random.Random(5)
        values = {random_number(1, 3, rng) for _ in range(200)}
        assert values == {1, 2, 3}

    def test_random_string_uses_charset(self):
        rng = random.Random(5)
        text = random_string("ab", 50, rng)
        assert len(text) == 50
        assert set(text) <= {"a", "b"}

    def test_random_string_negative_length_is_empty(self):
        assert random_string("ab", -2) == ""

    def test_random_string_requires_string_charset(self):
        with pytest.raises(TypeError):
            random_string(["a", "b"], 3)

"""조각 드롭 판정 테스트"""

import random
from collections import Counter

import pytest

from src.core.outdoor.drops import (
    DROP_CHANCES,
    FRAGMENT_DROP_WEIGHTS,
    DropSource,
    roll_fragment_drop,
    select_weighted_fragment,
)


class _FixedRandom(random.Random):
    def __init__(self, values) -> None:
        super().__init__(0)
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0)


class TestWeightedSelection:
    def test_frequencies_match_weights(self) -> None:
        weights = {"cat": 50, "bird": 30, "fox": 15, "dragon": 5}
        rng = random.Random(42)
        trials = 100_000

        counts = Counter(select_weighted_fragment(weights, rng) for _ in range(trials))

        total = sum(weights.values())
        for fragment_type, weight in weights.items():
            expected = weight / total
            assert counts[fragment_type] / trials == pytest.approx(expected, abs=0.01)

    def test_boundaries(self) -> None:
        weights = {"cat": 50, "bird": 50}
        assert select_weighted_fragment(weights, _FixedRandom([0.0])) == "cat"
        assert select_weighted_fragment(weights, _FixedRandom([0.5])) == "cat"
        assert select_weighted_fragment(weights, _FixedRandom([0.51])) == "bird"


class TestRollDrop:
    def test_no_drop_above_chance(self) -> None:
        rng = _FixedRandom([DROP_CHANCES[DropSource.FOREST]])
        assert roll_fragment_drop(DropSource.FOREST, rng) is None

    def test_forest_drop(self) -> None:
        rng = _FixedRandom([0.01, 0.99])
        assert roll_fragment_drop("forest", rng) == "dragon"

    def test_hunt_table(self) -> None:
        assert FRAGMENT_DROP_WEIGHTS[DropSource.HUNT]["bird"] == 35
        rng = _FixedRandom([0.0, 0.0])
        assert roll_fragment_drop(DropSource.HUNT, rng) == "cat"

    def test_happiness_is_current_pet(self) -> None:
        rng = _FixedRandom([0.01])
        assert roll_fragment_drop(DropSource.HAPPINESS, rng, "fox") == "fox"

    def test_happiness_chance(self) -> None:
        rng = _FixedRandom([0.06])
        assert roll_fragment_drop(DropSource.HAPPINESS, rng, "fox") is None

"""성공률 계산 / 해금 조건 테스트"""

import pytest

from src.core.synthesis.recipes import (
    MAX_SUCCESS_RATE,
    PotionRequirement,
    Recipe,
    UnlockRequirement,
    calculate_success_rate,
    check_unlock_requirement,
)


def _make_recipe(
    base: float = 0.7,
    threshold: int = 3,
    bonus: float = 0.1,
    min_level: int = 1,
    unlock: UnlockRequirement | None = None,
) -> Recipe:
    return Recipe(
        recipe_id=1,
        name="Test",
        target_pet_type="cat",
        fragment_type="cat",
        fragment_count=3,
        required_potion=PotionRequirement("common"),
        base_success_rate=base,
        pity_threshold=threshold,
        pity_bonus=bonus,
        min_player_level=min_level,
        unlock_requirement=unlock,
    )


class TestSuccessRate:
    def test_base_rate(self) -> None:
        assert calculate_success_rate(_make_recipe()) == pytest.approx(0.7)

    def test_pity_scenario(self) -> None:
        recipe = _make_recipe(base=0.7, threshold=3, bonus=0.1)
        assert calculate_success_rate(recipe, 3, 1) == pytest.approx(0.80)

    def test_below_threshold_no_bonus(self) -> None:
        assert calculate_success_rate(_make_recipe(), 2, 1) == pytest.approx(0.7)

    def test_pity_compounds_per_cycle(self) -> None:
        recipe = _make_recipe(base=0.1, threshold=3, bonus=0.1)
        one = calculate_success_rate(recipe, 3)
        two = calculate_success_rate(recipe, 6)
        assert two - recipe.base_success_rate >= 2 * recipe.pity_bonus - 1e-9
        assert two - one == pytest.approx(0.1)

    def test_level_bonus(self) -> None:
        recipe = _make_recipe(base=0.5, min_level=2)
        assert calculate_success_rate(recipe, 0, 4) == pytest.approx(0.54)
        # 최대 10%
        assert calculate_success_rate(recipe, 0, 20) == pytest.approx(0.60)
        # 최소 레벨 미만은 감점 없음
        assert calculate_success_rate(recipe, 0, 1) == pytest.approx(0.5)

    def test_capped(self) -> None:
        recipe = _make_recipe(base=0.9)
        assert calculate_success_rate(recipe, 30, 30) == MAX_SUCCESS_RATE

    @pytest.mark.parametrize("base", [0.1, 0.4, 0.55, 0.7, 0.9])
    def test_bounds_and_monotonic(self, base: float) -> None:
        recipe = _make_recipe(base=base, min_level=2)
        for level in range(1, 12):
            previous = 0.0
            for fails in range(0, 20):
                rate = calculate_success_rate(recipe, fails, level)
                assert recipe.base_success_rate <= rate <= MAX_SUCCESS_RATE
                assert rate >= previous
                previous = rate
        for fails in range(0, 20):
            previous = 0.0
            for level in range(1, 12):
                rate = calculate_success_rate(recipe, fails, level)
                assert rate >= previous
                previous = rate


class TestUnlock:
    def test_no_requirement(self) -> None:
        assert check_unlock_requirement(_make_recipe(), [])

    def test_pet_owned(self) -> None:
        recipe = _make_recipe(unlock=UnlockRequirement("pet_owned", "bird"))
        assert not check_unlock_requirement(recipe, ["cat"])
        assert check_unlock_requirement(recipe, ["cat", "bird"])

    def test_unknown_requirement_type_unlocked(self) -> None:
        recipe = _make_recipe(unlock=UnlockRequirement("quest_done"))
        assert check_unlock_requirement(recipe, [])

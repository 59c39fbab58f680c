"""SynthesisEngine 테스트

ManualScheduler로 단계 타이머를 진행하고, 판정 난수는 고정 값으로 주입한다.
"""

import random

import pytest

from src.core.errors import InvariantViolationError
from src.core.event_types import EventTypes
from src.core.synthesis.engine import SynthesisEngine
from src.core.synthesis.models import SynthesisPhase

FULL_RUN = 3.0  # preparing 0.5 + fusing 2.0 + burst 0.5


class _FixedRandom(random.Random):
    """random()이 지정한 값을 순서대로 반환"""

    def __init__(self, values) -> None:
        super().__init__(0)
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0) if self._values else 0.5


def _make_engine(game, rolls=()) -> SynthesisEngine:
    return SynthesisEngine(
        recipes=game.catalogs.recipes,
        ledger=game.ledger,
        collection=game.collection,
        notifications=game.notifications,
        event_bus=game.bus,
        scheduler=game.scheduler,
        rng=_FixedRandom(rolls),
    )


def _add_potions(game, count: int = 1, rarity: str = "common") -> None:
    game.ledger.add_stack(game.catalogs.get_potion_by_rarity(rarity), count)


def _add_fragments(game, fragment_type: str, count: int) -> None:
    game.ledger.add_stack(game.catalogs.get_fragment_type(fragment_type), count)


def _prepare(engine, game, recipe_id: int = 1) -> None:
    assert engine.select_recipe(recipe_id)
    assert engine.auto_fill_slots()
    assert engine.can_synthesize


class TestSelectRecipe:
    def test_select_unlocked(self, game) -> None:
        engine = _make_engine(game)
        assert engine.select_recipe(1)
        assert engine.selected_recipe.target_pet_type == "cat"

    def test_locked_recipe_rejected(self, game) -> None:
        engine = _make_engine(game)
        engine.select_recipe(1)

        assert not engine.select_recipe(3)  # bird 보유 필요
        assert engine.selected_recipe_id == 1
        assert "bird" in game.notifications.latest().message

    def test_unknown_recipe(self, game) -> None:
        engine = _make_engine(game)
        assert not engine.select_recipe(999)
        assert engine.selected_recipe_id is None


class TestSlots:
    def test_wrong_fragment_type(self, game) -> None:
        engine = _make_engine(game)
        engine.select_recipe(1)
        assert not engine.add_fragment_to_slot("bird", 1)
        assert engine.slots.placed_fragment_count == 0

    def test_quantity_capped_by_recipe(self, game) -> None:
        engine = _make_engine(game)
        engine.select_recipe(1)
        assert engine.add_fragment_to_slot("cat", 10)
        assert engine.slots.placed_fragment_count == 3
        assert not engine.add_fragment_to_slot("cat", 1)

    def test_quantity_capped_by_available(self, game) -> None:
        engine = _make_engine(game)
        engine.select_recipe(2)  # bird 5개 필요, 보유 3개
        assert engine.add_fragment_to_slot("bird", 5)
        assert engine.slots.placed_fragment_count == 3
        assert not engine.add_fragment_to_slot("bird", 1)

    def test_staging_does_not_touch_ledger(self, game) -> None:
        engine = _make_engine(game)
        engine.select_recipe(1)
        engine.add_fragment_to_slot("cat", 3)
        assert game.ledger.fragment_count("cat") == 5

    def test_potion_slot_requires_matching_owned_potion(self, game) -> None:
        engine = _make_engine(game)
        engine.select_recipe(1)
        assert not engine.set_potion_slot("common")  # 물약 없음
        _add_potions(game, 1, "rare")
        assert not engine.set_potion_slot("rare")  # 등급 불일치
        _add_potions(game, 1, "common")
        assert engine.set_potion_slot("common")

    def test_auto_fill_without_potion(self, game) -> None:
        engine = _make_engine(game)
        engine.select_recipe(1)
        assert not engine.auto_fill_slots()
        assert engine.slots.placed_fragment_count == 3
        assert not engine.can_synthesize

    def test_remove_fragment(self, game) -> None:
        engine = _make_engine(game)
        engine.select_recipe(1)
        engine.add_fragment_to_slot("cat", 3)
        assert engine.remove_fragment_from_slot(0, 1)
        assert engine.slots.placed_fragment_count == 2
        assert engine.remove_fragment_from_slot(0)
        assert engine.slots.fragments == []
        assert not engine.remove_fragment_from_slot(0)

    def test_can_synthesize_rechecks_ledger(self, game) -> None:
        engine = _make_engine(game)
        _add_potions(game)
        _prepare(engine, game)
        game.ledger.remove_fragments("cat", 4)
        assert not engine.can_synthesize


class TestPhases:
    def test_phase_sequence(self, game) -> None:
        engine = _make_engine(game, rolls=[0.99])
        _add_potions(game)
        _prepare(engine, game)
        phases = []
        game.bus.subscribe(
            EventTypes.SYNTHESIS_PHASE_CHANGED, lambda e: phases.append(e.data["to"])
        )

        assert engine.start_synthesis()
        assert engine.phase == SynthesisPhase.PREPARING
        assert engine.is_synthesizing

        game.scheduler.advance(0.5)
        assert engine.phase == SynthesisPhase.FUSING
        game.scheduler.advance(2.0)
        assert engine.phase == SynthesisPhase.BURST
        assert engine.result is None
        game.scheduler.advance(0.5)
        assert engine.phase == SynthesisPhase.RESULT
        assert not engine.is_synthesizing

        assert phases == ["preparing", "fusing", "burst", "result"]

        assert engine.close_result()
        assert engine.phase == SynthesisPhase.IDLE
        assert engine.result is None

    def test_reentry_rejected(self, game) -> None:
        engine = _make_engine(game)
        _add_potions(game)
        _prepare(engine, game)
        assert engine.start_synthesis()
        assert not engine.start_synthesis()
        assert not engine.select_recipe(2)
        assert game.scheduler.pending_count == 3

    def test_start_without_materials(self, game) -> None:
        engine = _make_engine(game)
        engine.select_recipe(1)
        assert not engine.start_synthesis()
        assert engine.phase == SynthesisPhase.IDLE

    def test_reset_mid_run_consumes_nothing(self, game) -> None:
        engine = _make_engine(game, rolls=[0.0])
        _add_potions(game)
        _prepare(engine, game)
        engine.start_synthesis()
        game.scheduler.advance(1.0)

        engine.reset_synthesis()
        game.scheduler.advance(10.0)

        assert engine.phase == SynthesisPhase.IDLE
        assert engine.result is None
        assert game.ledger.fragment_count("cat") == 5
        assert game.ledger.find_potion("common") is not None

    def test_on_finished_callback(self, game) -> None:
        engine = _make_engine(game, rolls=[0.99])
        _add_potions(game)
        _prepare(engine, game)
        results = []
        engine.on_finished = results.append
        engine.start_synthesis()
        game.scheduler.advance(FULL_RUN)
        assert len(results) == 1
        assert results[0] is engine.result


class TestOutcome:
    def test_failure_keeps_fragments_consumes_potion(self, game) -> None:
        engine = _make_engine(game, rolls=[0.99])
        _add_potions(game)
        _prepare(engine, game)
        failed = []
        game.bus.subscribe(EventTypes.SYNTHESIS_FAILED, failed.append)

        engine.start_synthesis()
        game.scheduler.advance(FULL_RUN)

        result = engine.result
        assert result is not None
        assert not result.success
        assert result.fail_count == 1
        assert game.ledger.fragment_count("cat") == 5
        assert game.ledger.find_potion("common") is None
        assert engine.fail_count(1) == 1
        assert engine.slots.potion_rarity is None
        assert engine.slots.placed_fragment_count == 3
        assert len(failed) == 1

    def test_success_consumes_exactly_and_adds_pet(self, game) -> None:
        engine = _make_engine(game, rolls=[0.0])
        _add_fragments(game, "bird", 2)  # 총 5개
        _add_potions(game)
        _prepare(engine, game, recipe_id=2)
        synthesized = []
        game.bus.subscribe(EventTypes.PET_SYNTHESIZED, synthesized.append)

        engine.start_synthesis()
        game.scheduler.advance(FULL_RUN)

        result = engine.result
        assert result.success
        assert not result.already_owned
        assert game.ledger.fragment_count("bird") == 0
        assert game.ledger.find_potion("common") is None
        assert game.collection.owned_pet_types == ["cat", "bird"]
        assert game.collection.get(result.pet_instance_id).pet_type == "bird"
        assert engine.slots.placed_fragment_count == 0
        assert len(synthesized) == 1

    def test_second_success_does_not_duplicate(self, game) -> None:
        engine = _make_engine(game, rolls=[0.0])
        _add_potions(game)
        _prepare(engine, game, recipe_id=1)  # cat은 이미 보유

        engine.start_synthesis()
        game.scheduler.advance(FULL_RUN)

        assert engine.result.success
        assert engine.result.already_owned
        assert game.ledger.fragment_count("cat") == 2
        assert game.collection.owned_pet_types == ["cat"]

    def test_success_resets_fail_count(self, game) -> None:
        engine = _make_engine(game, rolls=[0.99, 0.0])
        _add_potions(game, 2)
        _prepare(engine, game)

        engine.start_synthesis()
        game.scheduler.advance(FULL_RUN)
        assert engine.fail_count(1) == 1

        assert engine.set_potion_slot("common")
        engine.start_synthesis()
        game.scheduler.advance(FULL_RUN)
        assert engine.result.success
        assert engine.fail_count(1) == 0

    def test_pity_activates_after_threshold(self, game) -> None:
        engine = _make_engine(game, rolls=[0.99, 0.99, 0.99])
        _add_potions(game, 3)
        _prepare(engine, game)

        for _ in range(3):
            engine.set_potion_slot("common")
            assert engine.start_synthesis()
            game.scheduler.advance(FULL_RUN)

        assert engine.is_pity_active()
        assert engine.pity_progress() == (0, 3)
        assert engine.current_success_rate() == pytest.approx(0.80)
        assert engine.result.pity_active

    def test_rate_uses_fail_count_at_burst(self, game) -> None:
        engine = _make_engine(game, rolls=[0.75])
        _add_potions(game)
        _prepare(engine, game)
        engine.fail_counts[1] = 3  # 0.80

        engine.start_synthesis()
        game.scheduler.advance(FULL_RUN)

        assert engine.result.success
        assert engine.result.success_rate == pytest.approx(0.80)

    def test_ledger_drift_raises_invariant_error(self, game) -> None:
        engine = _make_engine(game, rolls=[0.0])
        _add_potions(game)
        _prepare(engine, game)
        engine.start_synthesis()
        game.scheduler.advance(1.0)

        # 검증 통과 후 장부가 어긋난 상황
        game.ledger.remove_fragments("cat", 5)

        with pytest.raises(InvariantViolationError):
            game.scheduler.advance(FULL_RUN)
        assert not engine.is_synthesizing
        assert engine.phase == SynthesisPhase.IDLE
        assert game.ledger.find_potion("common") is not None

    def test_result_without_roll_raises_invariant_error(self, game) -> None:
        engine = _make_engine(game, rolls=[0.0])
        _add_potions(game)
        _prepare(engine, game)
        engine.start_synthesis()
        game.scheduler.advance(2.5)
        assert engine.phase == SynthesisPhase.BURST

        engine._pending_roll = None
        with pytest.raises(InvariantViolationError):
            game.scheduler.advance(0.5)
        assert not engine.is_synthesizing
        assert engine.phase == SynthesisPhase.IDLE
        assert engine.fail_count(1) == 0
        assert game.ledger.fragment_count("cat") == 5


class TestPersistence:
    def test_round_trip_fail_counts(self, game) -> None:
        engine = _make_engine(game)
        engine.fail_counts = {1: 2, 3: 0}
        data = engine.to_dict()
        assert data == {"fail_counts": {"1": 2, "3": 0}}

        restored = _make_engine(game)
        restored.load(data)
        assert restored.fail_counts == {1: 2}

    def test_load_ignores_invalid_entries(self, game) -> None:
        engine = _make_engine(game)
        engine.load({"fail_counts": {"x": 1, "2": "bad", "4": 5}})
        assert engine.fail_counts == {4: 5}

"""BuffRegistry 테스트"""

import pytest

from src.core.buffs import Buff, BuffRegistry, BuffSpec, BuffType


def _make_buff(
    buff_type: BuffType = BuffType.HUNT_REWARD_BOOST, duration: int = 1
) -> Buff:
    return Buff(buff_type=buff_type, value=0.3, duration=duration)


class TestActivate:
    def test_activate_adds_buff(self) -> None:
        registry = BuffRegistry()
        assert registry.activate(_make_buff())
        assert registry.has(BuffType.HUNT_REWARD_BOOST)
        assert len(registry.active) == 1

    def test_duplicate_type_rejected(self) -> None:
        registry = BuffRegistry()
        registry.activate(_make_buff(duration=2))
        assert not registry.activate(_make_buff(duration=5))
        assert registry.find(BuffType.HUNT_REWARD_BOOST).duration == 2

    def test_different_types_coexist(self) -> None:
        registry = BuffRegistry()
        registry.activate(_make_buff(BuffType.HUNT_REWARD_BOOST))
        registry.activate(_make_buff(BuffType.AUTO_HEAL))
        assert len(registry.active) == 2

    def test_non_positive_duration_raises(self) -> None:
        with pytest.raises(ValueError):
            BuffRegistry().activate(_make_buff(duration=0))


class TestConsume:
    def test_consume_missing_returns_none(self) -> None:
        assert BuffRegistry().consume(BuffType.EXP_BOOST) is None

    def test_consume_decrements_then_removes(self) -> None:
        registry = BuffRegistry()
        registry.activate(_make_buff(duration=2))

        first = registry.consume(BuffType.HUNT_REWARD_BOOST)
        assert first is not None
        assert first.value == 0.3
        assert registry.find(BuffType.HUNT_REWARD_BOOST).duration == 1

        second = registry.consume(BuffType.HUNT_REWARD_BOOST)
        assert second is not None
        assert not registry.has(BuffType.HUNT_REWARD_BOOST)

        assert registry.consume(BuffType.HUNT_REWARD_BOOST) is None

    def test_find_does_not_consume(self) -> None:
        registry = BuffRegistry()
        registry.activate(_make_buff())
        registry.find(BuffType.HUNT_REWARD_BOOST)
        assert registry.find(BuffType.HUNT_REWARD_BOOST).duration == 1


class TestPersistence:
    def test_to_list_and_load(self) -> None:
        registry = BuffRegistry()
        registry.activate(
            Buff(buff_type=BuffType.AUTO_HEAL, value=50, duration=1, threshold=30)
        )
        data = registry.to_list()
        assert data == [
            {"type": "auto_heal", "value": 50, "duration": 1, "threshold": 30}
        ]

        restored = BuffRegistry()
        restored.load(data)
        buff = restored.find(BuffType.AUTO_HEAL)
        assert buff is not None
        assert buff.threshold == 30

    def test_load_skips_duplicates_and_exhausted(self) -> None:
        registry = BuffRegistry()
        registry.load(
            [
                {"type": "exp_boost", "value": 2, "duration": 1},
                {"type": "exp_boost", "value": 3, "duration": 1},
                {"type": "auto_heal", "value": 50, "duration": 0},
            ]
        )
        assert len(registry.active) == 1
        assert registry.find(BuffType.EXP_BOOST).value == 2


class TestBuffSpec:
    def test_from_dict(self) -> None:
        spec = BuffSpec.from_dict({"type": "auto_heal", "value": 50, "threshold": 30})
        assert spec.buff_type == BuffType.AUTO_HEAL
        assert spec.duration == 1
        buff = spec.to_buff()
        assert buff.threshold == 30

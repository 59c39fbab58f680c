"""펫 수치 조작 테스트"""

from src.core.pet import stats
from src.core.pet.models import PetInstance, PetStatus


def _make_pet(**overrides) -> PetInstance:
    data = dict(
        instance_id="pet_1",
        pet_type="cat",
        name="Slugcat",
        hunger=50,
        mood=50,
        health=100,
    )
    data.update(overrides)
    return PetInstance(**data)


class TestFeed:
    def test_block_reasons(self) -> None:
        assert stats.feed_block_reason(None) == "no_active_pet"
        assert stats.feed_block_reason(_make_pet(is_dead=True)) == "pet_dead"
        assert stats.feed_block_reason(_make_pet(is_at_home=False)) == "not_at_home"
        assert stats.feed_block_reason(_make_pet(hunger=100)) == "already_full"
        assert stats.feed_block_reason(_make_pet()) is None

    def test_apply_food_clamps(self) -> None:
        pet = _make_pet(hunger=90, mood=98)
        gains = stats.apply_food(pet, food_value=40, mood_value=15)
        assert gains == {"hunger_gain": 10, "mood_gain": 2}
        assert pet.status == PetStatus.EATING

    def test_default_mood_increase(self) -> None:
        pet = _make_pet()
        gains = stats.apply_food(pet, food_value=20)
        assert gains["mood_gain"] == stats.DEFAULT_MOOD_INCREASE

    def test_finish_eating_only_from_eating(self) -> None:
        pet = _make_pet(status=PetStatus.HUNTING)
        stats.finish_eating(pet)
        assert pet.status == PetStatus.HUNTING

        pet.status = PetStatus.EATING
        stats.finish_eating(pet)
        assert pet.status == PetStatus.IDLE


class TestExperience:
    def test_level_up(self) -> None:
        pet = _make_pet()
        assert stats.add_experience(pet, 90) == 0
        assert stats.add_experience(pet, 15) == 1
        assert pet.level == 2
        assert stats.level_progress(pet) == 5

    def test_multi_level(self) -> None:
        pet = _make_pet()
        assert stats.add_experience(pet, 250) == 2
        assert pet.level == 3


class TestOutdoor:
    def test_send_and_recall(self) -> None:
        pet = _make_pet()
        stats.send_outdoor(pet, PetStatus.PLAYING)
        assert not pet.is_at_home
        stats.recall_home(pet)
        assert pet.is_at_home
        assert pet.status == PetStatus.IDLE

    def test_dead_pet_stays_tired(self) -> None:
        pet = _make_pet(is_dead=True, status=PetStatus.TIRED, is_at_home=False)
        stats.recall_home(pet)
        assert pet.is_at_home
        assert pet.status == PetStatus.TIRED

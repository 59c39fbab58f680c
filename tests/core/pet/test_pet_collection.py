"""PetCollection 테스트"""

import pytest

from src.core.pet.collection import PetCollection
from src.core.pet.models import PassiveEffect, PetInstance


@pytest.fixture()
def collection(catalogs) -> PetCollection:
    return PetCollection(catalogs.pets)


class TestStarter:
    def test_init_with_starter(self, collection) -> None:
        instance_id = collection.init_with_starter_pet()
        assert instance_id is not None
        assert collection.active_pet_id == instance_id
        assert collection.active_pet.pet_type == "cat"
        assert collection.active_pet.hunger == 80

    def test_init_twice_does_not_duplicate(self, collection) -> None:
        first = collection.init_with_starter_pet()
        second = collection.init_with_starter_pet()
        assert first == second
        assert len(collection.owned_pets) == 1

    def test_existing_stats_carried(self, collection) -> None:
        collection.init_with_starter_pet({"hunger": 10, "level": 3})
        pet = collection.active_pet
        assert pet.hunger == 10
        assert pet.level == 3


class TestAddPet:
    def test_add_new_type(self, collection) -> None:
        collection.init_with_starter_pet()
        instance_id = collection.add_pet("bird")
        assert collection.is_pet_owned("bird")
        assert collection.get(instance_id).name == "Wind Feather"
        # 활성 펫은 그대로
        assert collection.active_pet.pet_type == "cat"

    def test_duplicate_type_returns_existing(self, collection) -> None:
        collection.init_with_starter_pet()
        first = collection.add_pet("bird")
        second = collection.add_pet("bird")
        assert first == second
        assert collection.owned_pet_types == ["cat", "bird"]

    def test_unknown_type(self, collection) -> None:
        assert collection.add_pet("unicorn") is None

    def test_progress(self, collection) -> None:
        collection.init_with_starter_pet()
        collection.add_pet("fox")
        assert collection.collection_progress() == {
            "owned": 2,
            "total": 4,
            "percentage": 50,
        }


class TestSetActive:
    def test_switch(self, collection) -> None:
        collection.init_with_starter_pet()
        bird_id = collection.add_pet("bird")
        assert collection.set_active_pet(bird_id)
        assert collection.active_pet.pet_type == "bird"

    def test_switch_blocked_while_outdoors(self, collection) -> None:
        collection.init_with_starter_pet()
        bird_id = collection.add_pet("bird")
        collection.active_pet.is_at_home = False
        assert not collection.set_active_pet(bird_id)
        assert collection.active_pet.pet_type == "cat"

    def test_switch_unknown(self, collection) -> None:
        collection.init_with_starter_pet()
        assert not collection.set_active_pet("missing")

    def test_inactive_pet_stats_frozen(self, collection) -> None:
        cat_id = collection.init_with_starter_pet()
        bird_id = collection.add_pet("bird")
        collection.active_pet.hunger = 5
        collection.set_active_pet(bird_id)
        assert collection.get(cat_id).hunger == 5


class TestPassive:
    def test_no_passive_returns_base(self, collection) -> None:
        collection.init_with_starter_pet()
        assert (
            collection.apply_passive_skill_effect(PassiveEffect.EXPLORE_TIME_REDUCE, 3.0)
            == 3.0
        )

    def test_explore_time_reduce(self, collection) -> None:
        collection.init_with_starter_pet()
        collection.set_active_pet(collection.add_pet("bird"))
        value = collection.apply_passive_skill_effect(
            PassiveEffect.EXPLORE_TIME_REDUCE, 3.0
        )
        assert value == pytest.approx(2.4)

    def test_mismatched_effect_ignored(self, collection) -> None:
        collection.init_with_starter_pet()
        collection.set_active_pet(collection.add_pet("bird"))
        assert (
            collection.apply_passive_skill_effect(PassiveEffect.HUNT_REWARD_BOOST, 100)
            == 100
        )

    def test_hunt_reward_and_death_chance(self, collection) -> None:
        collection.init_with_starter_pet()
        collection.set_active_pet(collection.add_pet("fox"))
        assert collection.apply_passive_skill_effect(
            PassiveEffect.HUNT_REWARD_BOOST, 100
        ) == pytest.approx(115)

        collection.set_active_pet(collection.add_pet("dragon"))
        assert collection.apply_passive_skill_effect(
            PassiveEffect.DEATH_CHANCE_REDUCE, 0.10
        ) == pytest.approx(0.05)


class TestPersistence:
    def test_round_trip(self, collection, catalogs) -> None:
        collection.init_with_starter_pet()
        bird_id = collection.add_pet("bird")
        collection.set_active_pet(bird_id)

        restored = PetCollection(catalogs.pets)
        restored.load(collection.to_dict())
        assert restored.active_pet_id == bird_id
        assert restored.owned_pet_types == ["cat", "bird"]

    def test_load_drops_duplicate_type_and_fixes_active(self, collection) -> None:
        pet_a = PetInstance("a", "cat", "A", hunger=50, mood=50, health=50)
        pet_b = PetInstance("b", "cat", "B", hunger=50, mood=50, health=50)
        collection.load(
            {
                "owned_pets": [pet_a.to_dict(), pet_b.to_dict()],
                "active_pet_id": "missing",
            }
        )
        assert len(collection.owned_pets) == 1
        assert collection.active_pet_id == "a"

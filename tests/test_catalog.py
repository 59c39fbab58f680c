"""카탈로그 로드 테스트"""

import json

from src.core.item.models import ItemCategory, Rarity
from src.core.item.registry import ItemRegistry
from src.core.synthesis.recipes import RecipeRegistry


class TestDefaultCatalogs:
    def test_pet_types(self, catalogs) -> None:
        assert catalogs.pets.count() == 4
        assert catalogs.pets.get_starter().pet_type == "cat"
        bird = catalogs.get_pet_type("bird")
        assert bird.passive_skill is not None
        assert bird.passive_skill.value == 0.2

    def test_fragments_and_potions(self, catalogs) -> None:
        fragment = catalogs.get_fragment_type("dragon")
        assert fragment is not None
        assert fragment.category == ItemCategory.FRAGMENT
        potion = catalogs.get_potion_by_rarity("rare")
        assert potion is not None
        assert potion.rarity == Rarity.RARE

    def test_item_buff_parsed(self, catalogs) -> None:
        first_aid = catalogs.get_item(11)
        assert first_aid.buff is not None
        assert first_aid.buff.threshold == 30

    def test_recipes_sorted(self, catalogs) -> None:
        ids = [r.recipe_id for r in catalogs.get_all_recipes()]
        assert ids == sorted(ids)
        assert catalogs.get_recipe_for_pet_type("fox").recipe_id == 3


class TestLoadErrors:
    def test_bad_item_skipped(self, tmp_path) -> None:
        path = tmp_path / "items.json"
        path.write_text(
            json.dumps(
                [
                    {"item_id": 1, "key": "ok", "category": "food", "rarity": "common"},
                    {"item_id": 2, "key": "bad", "category": "weapon", "rarity": "common"},
                ]
            ),
            encoding="utf-8",
        )
        registry = ItemRegistry()
        assert registry.load_from_json(path) == 1
        assert registry.get(2) is None

    def test_zero_pity_threshold_skipped(self, tmp_path) -> None:
        path = tmp_path / "recipes.json"
        path.write_text(
            json.dumps(
                [
                    {
                        "recipe_id": 9,
                        "target_pet_type": "cat",
                        "fragment_type": "cat",
                        "fragment_count": 1,
                        "required_potion": {"rarity": "common"},
                        "base_success_rate": 0.5,
                        "pity_threshold": 0,
                        "pity_bonus": 0.1,
                    }
                ]
            ),
            encoding="utf-8",
        )
        registry = RecipeRegistry()
        assert registry.load_from_json(path) == 0

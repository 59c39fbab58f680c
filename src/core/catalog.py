"""정적 카탈로그 묶음 — 펫 종류, 조각, 아이템, 레시피 (읽기 전용)"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from src.core.item.models import ItemDefinition, Rarity
from src.core.item.registry import ItemRegistry
from src.core.pet.models import PetType
from src.core.pet.registry import PetTypeRegistry
from src.core.synthesis.recipes import Recipe, RecipeRegistry

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class CatalogRegistry:
    """세 저장소를 하나로 묶은 조회 창구. 코어는 카탈로그를 변경하지 않는다."""

    def __init__(
        self,
        pets: PetTypeRegistry,
        items: ItemRegistry,
        recipes: RecipeRegistry,
    ) -> None:
        self.pets = pets
        self.items = items
        self.recipes = recipes

    def get_pet_type(self, pet_type: str) -> Optional[PetType]:
        return self.pets.get(pet_type)

    def get_fragment_type(self, fragment_type: str) -> Optional[ItemDefinition]:
        return self.items.get_fragment(fragment_type)

    def get_item(self, item_id: int) -> Optional[ItemDefinition]:
        return self.items.get(item_id)

    def get_potion_by_rarity(self, rarity: Rarity | str) -> Optional[ItemDefinition]:
        return self.items.get_potion(rarity)

    def get_recipe(self, recipe_id: int) -> Optional[Recipe]:
        return self.recipes.get(recipe_id)

    def get_all_recipes(self) -> list[Recipe]:
        return self.recipes.get_all()

    def get_recipe_for_pet_type(self, pet_type: str) -> Optional[Recipe]:
        return self.recipes.get_for_pet_type(pet_type)


def load_default_catalogs(data_dir: str | Path = DATA_DIR) -> CatalogRegistry:
    """data 디렉터리의 JSON 4종 로드"""
    data_dir = Path(data_dir)

    pets = PetTypeRegistry()
    pets.load_from_json(data_dir / "pet_types.json")

    items = ItemRegistry()
    items.load_from_json(data_dir / "items.json")
    items.load_fragments_from_json(data_dir / "fragment_types.json")

    recipes = RecipeRegistry()
    recipes.load_from_json(data_dir / "recipes.json")

    logger.info(
        "Catalogs loaded: %d pet types, %d items, %d recipes",
        pets.count(),
        items.count(),
        len(recipes.get_all()),
    )
    return CatalogRegistry(pets, items, recipes)

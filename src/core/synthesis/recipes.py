"""합성 레시피 — 성공률 계산 + 해금 판정 — 순수 Python"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

# === 성공률 ===
MAX_SUCCESS_RATE = 0.95  # 상한. 성공은 절대 보장되지 않는다
LEVEL_BONUS_PER_LEVEL = 0.02
MAX_LEVEL_BONUS = 0.10


@dataclass(frozen=True)
class PotionRequirement:
    rarity: str  # "common"|"uncommon"|"rare"|"epic"
    count: int = 1


@dataclass(frozen=True)
class UnlockRequirement:
    req_type: str  # "pet_owned"
    pet_type: Optional[str] = None


@dataclass(frozen=True)
class Recipe:
    """합성 레시피 — 불변 참조 데이터"""

    recipe_id: int
    name: str
    target_pet_type: str
    fragment_type: str
    fragment_count: int
    required_potion: PotionRequirement
    base_success_rate: float  # (0, 1)
    pity_threshold: int  # 양의 정수
    pity_bonus: float
    min_player_level: int = 1
    unlock_requirement: Optional[UnlockRequirement] = None


def calculate_success_rate(
    recipe: Recipe, fail_count: int = 0, player_level: int = 1
) -> float:
    """합성 성공률.

    1. 천장 보너스: 실패 횟수가 임계치 이상이면 완주한 주기마다 pity_bonus 누적
    2. 레벨 보너스: 최소 레벨 초과 1당 +2%, 0~10%
    3. 상한 95%
    """
    rate = recipe.base_success_rate

    if fail_count >= recipe.pity_threshold:
        cycles = math.floor(fail_count / recipe.pity_threshold)
        rate += recipe.pity_bonus * cycles

    level_diff = player_level - recipe.min_player_level
    level_bonus = min(max(level_diff * LEVEL_BONUS_PER_LEVEL, 0.0), MAX_LEVEL_BONUS)
    rate += level_bonus

    return min(rate, MAX_SUCCESS_RATE)


def check_unlock_requirement(recipe: Recipe, owned_pet_types: Iterable[str]) -> bool:
    """해금 여부. 요구 조건 없음 → 해금, pet_owned → 해당 종류 보유 여부."""
    req = recipe.unlock_requirement
    if req is None:
        return True

    if req.req_type == "pet_owned":
        return req.pet_type in set(owned_pet_types)

    logger.warning("Unknown unlock requirement type: %s", req.req_type)
    return True


class RecipeRegistry:
    """레시피 저장소 — recipes.json 로드"""

    def __init__(self) -> None:
        self._recipes: dict[int, Recipe] = {}

    def load_from_json(self, path: str | Path) -> int:
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            raw_list: list[dict] = json.load(f)

        count = 0
        for raw in raw_list:
            try:
                req_raw = raw.get("unlock_requirement")
                potion_raw = raw["required_potion"]
                recipe = Recipe(
                    recipe_id=int(raw["recipe_id"]),
                    name=raw.get("name", ""),
                    target_pet_type=raw["target_pet_type"],
                    fragment_type=raw["fragment_type"],
                    fragment_count=int(raw["fragment_count"]),
                    required_potion=PotionRequirement(
                        rarity=potion_raw["rarity"],
                        count=int(potion_raw.get("count", 1)),
                    ),
                    base_success_rate=float(raw["base_success_rate"]),
                    pity_threshold=int(raw["pity_threshold"]),
                    pity_bonus=float(raw["pity_bonus"]),
                    min_player_level=int(raw.get("min_player_level", 1)),
                    unlock_requirement=(
                        UnlockRequirement(
                            req_type=req_raw["type"], pet_type=req_raw.get("pet_type")
                        )
                        if req_raw
                        else None
                    ),
                )
                if recipe.pity_threshold <= 0:
                    raise ValueError("pity_threshold must be positive")
                self.register(recipe)
                count += 1
            except (KeyError, ValueError) as e:
                logger.warning(
                    "Failed to load recipe: %s — %s", raw.get("recipe_id", "?"), e
                )

        logger.info("Loaded %d recipes from %s", count, path)
        return count

    def register(self, recipe: Recipe) -> None:
        if recipe.recipe_id in self._recipes:
            logger.warning("Overwriting existing recipe: %s", recipe.recipe_id)
        self._recipes[recipe.recipe_id] = recipe

    def get(self, recipe_id: int) -> Optional[Recipe]:
        return self._recipes.get(recipe_id)

    def get_for_pet_type(self, pet_type: str) -> Optional[Recipe]:
        for recipe in self._recipes.values():
            if recipe.target_pet_type == pet_type:
                return recipe
        return None

    def get_all(self) -> list[Recipe]:
        return sorted(self._recipes.values(), key=lambda r: r.recipe_id)

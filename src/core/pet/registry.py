"""펫 종류 저장소 — pet_types.json 로드"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from .models import BaseStats, PassiveEffect, PassiveSkill, PetType

logger = logging.getLogger(__name__)


class PetTypeRegistry:
    def __init__(self) -> None:
        self._types: dict[str, PetType] = {}

    def load_from_json(self, path: str | Path) -> int:
        """pet_types.json 로드. 반환: 로드된 수량."""
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            raw_list: list[dict] = json.load(f)

        count = 0
        for raw in raw_list:
            try:
                skill_raw = raw.get("passive_skill")
                skill = None
                if skill_raw:
                    skill = PassiveSkill(
                        name=skill_raw.get("name", ""),
                        effect=PassiveEffect(skill_raw["effect"]),
                        value=float(skill_raw["value"]),
                    )
                stats = raw["base_stats"]
                pet_type = PetType(
                    pet_type=raw["pet_type"],
                    catalog_id=int(raw["catalog_id"]),
                    name=raw.get("name", raw["pet_type"]),
                    rarity=raw.get("rarity", "common"),
                    base_stats=BaseStats(
                        hunger=int(stats["hunger"]),
                        mood=int(stats["mood"]),
                        health=int(stats["health"]),
                        max_hunger=int(stats.get("max_hunger", 100)),
                        max_mood=int(stats.get("max_mood", 100)),
                        max_health=int(stats.get("max_health", 100)),
                    ),
                    passive_skill=skill,
                    is_starter=bool(raw.get("is_starter", False)),
                )
                self.register(pet_type)
                count += 1
            except (KeyError, ValueError) as e:
                logger.warning(
                    "Failed to load pet type: %s — %s", raw.get("pet_type", "?"), e
                )

        logger.info("Loaded %d pet types from %s", count, path)
        return count

    def register(self, pet_type: PetType) -> None:
        if pet_type.pet_type in self._types:
            logger.warning("Overwriting existing pet type: %s", pet_type.pet_type)
        self._types[pet_type.pet_type] = pet_type

    def get(self, pet_type: str) -> Optional[PetType]:
        return self._types.get(pet_type)

    def get_all(self) -> list[PetType]:
        return list(self._types.values())

    def get_starter(self) -> Optional[PetType]:
        for pet_type in self._types.values():
            if pet_type.is_starter:
                return pet_type
        return None

    def count(self) -> int:
        return len(self._types)

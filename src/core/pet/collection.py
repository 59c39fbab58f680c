"""펫 컬렉션 — 보유 펫, 활성 펫, 패시브 스킬 적용

규칙:
- 펫 종류당 최대 1마리 (합성 성공이 중복 종류를 만들지 않음)
- 활성 펫은 정확히 1마리, 먹이/외출 대상은 활성 펫뿐
- 활성 펫의 PetInstance가 실시간 상태 (동기화 단계 없음)
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Optional

from .models import PassiveEffect, PassiveSkill, PetInstance, PetType
from .registry import PetTypeRegistry

logger = logging.getLogger(__name__)


class PetCollection:
    def __init__(self, registry: PetTypeRegistry) -> None:
        self._registry = registry
        self._pets: list[PetInstance] = []
        self._active_id: Optional[str] = None

    # === 조회 ===

    @property
    def owned_pets(self) -> list[PetInstance]:
        return list(self._pets)

    @property
    def active_pet_id(self) -> Optional[str]:
        return self._active_id

    @property
    def active_pet(self) -> Optional[PetInstance]:
        if self._active_id is None:
            return None
        return self.get(self._active_id)

    @property
    def active_pet_type(self) -> Optional[PetType]:
        pet = self.active_pet
        if pet is None:
            return None
        return self._registry.get(pet.pet_type)

    @property
    def owned_pet_types(self) -> list[str]:
        return [p.pet_type for p in self._pets]

    def get(self, instance_id: str) -> Optional[PetInstance]:
        for pet in self._pets:
            if pet.instance_id == instance_id:
                return pet
        return None

    def is_pet_owned(self, pet_type: str) -> bool:
        return any(p.pet_type == pet_type for p in self._pets)

    def get_owned_pet_by_type(self, pet_type: str) -> Optional[PetInstance]:
        for pet in self._pets:
            if pet.pet_type == pet_type:
                return pet
        return None

    def collection_progress(self) -> dict[str, int]:
        """{"owned": n, "total": m, "percentage": p}"""
        total = self._registry.count()
        owned = len(self._pets)
        percentage = round(owned / total * 100) if total else 0
        return {"owned": owned, "total": total, "percentage": percentage}

    # === 생성/전환 ===

    def _new_instance(
        self, pet_type: PetType, existing_stats: Optional[dict[str, Any]] = None
    ) -> PetInstance:
        stats = existing_stats or {}
        base = pet_type.base_stats
        return PetInstance(
            instance_id=f"pet_{uuid.uuid4().hex[:12]}",
            pet_type=pet_type.pet_type,
            name=pet_type.name,
            hunger=int(stats.get("hunger", base.hunger)),
            mood=int(stats.get("mood", base.mood)),
            health=int(stats.get("health", base.health)),
            max_hunger=base.max_hunger,
            max_mood=base.max_mood,
            max_health=base.max_health,
            level=int(stats.get("level", 1)),
            experience=int(stats.get("experience", 0)),
        )

    def init_with_starter_pet(
        self, existing_stats: Optional[dict[str, Any]] = None
    ) -> Optional[str]:
        """스타터 펫 생성 + 활성화. 이미 있으면 건너뛴다."""
        starter = self._registry.get_starter()
        if starter is None:
            logger.error("No starter pet type registered")
            return None

        existing = self.get_owned_pet_by_type(starter.pet_type)
        if existing is not None:
            logger.debug("Starter pet already owned, skip init")
            return existing.instance_id

        pet = self._new_instance(starter, existing_stats)
        self._pets.append(pet)
        self._active_id = pet.instance_id
        logger.info("Starter pet created: %s (%s)", pet.name, pet.instance_id)
        return pet.instance_id

    def add_pet(self, pet_type: str) -> Optional[str]:
        """새 펫 추가. 반환: instance_id.

        이미 보유한 종류면 새로 만들지 않고 기존 instance_id를 반환한다.
        알 수 없는 종류면 None.
        """
        config = self._registry.get(pet_type)
        if config is None:
            logger.error("Unknown pet type: %s", pet_type)
            return None

        existing = self.get_owned_pet_by_type(pet_type)
        if existing is not None:
            logger.info("Pet type %s already owned, not duplicated", pet_type)
            return existing.instance_id

        pet = self._new_instance(config)
        self._pets.append(pet)
        if self._active_id is None:
            self._active_id = pet.instance_id
        logger.info("New pet joined: %s (%s)", pet.name, pet.instance_id)
        return pet.instance_id

    def set_active_pet(self, instance_id: str) -> bool:
        """활성 펫 전환. 현재 활성 펫이 외출 중이면 거부."""
        pet = self.get(instance_id)
        if pet is None:
            logger.warning("Pet not found: %s", instance_id)
            return False

        current = self.active_pet
        if current is not None and current is not pet and not current.is_at_home:
            logger.info("Cannot switch while %s is outdoors", current.instance_id)
            return False

        self._active_id = instance_id
        logger.info("Active pet switched: %s", pet.name)
        return True

    # === 패시브 스킬 ===

    def get_passive_skill(self, pet_type: str) -> Optional[PassiveSkill]:
        config = self._registry.get(pet_type)
        return config.passive_skill if config else None

    def apply_passive_skill_effect(
        self, effect: PassiveEffect, base_value: float
    ) -> float:
        """활성 펫의 패시브가 effect와 일치할 때만 적용, 아니면 base_value 그대로."""
        config = self.active_pet_type
        skill = config.passive_skill if config else None
        if skill is None or skill.effect != effect:
            return base_value

        if effect == PassiveEffect.EXPLORE_TIME_REDUCE:
            return base_value * (1 - skill.value)
        if effect == PassiveEffect.HUNT_REWARD_BOOST:
            return base_value * (1 + skill.value)
        if effect == PassiveEffect.DEATH_CHANCE_REDUCE:
            return max(0.0, base_value - skill.value)
        return base_value

    # === 저장 ===

    def to_dict(self) -> dict[str, Any]:
        return {
            "owned_pets": [p.to_dict() for p in self._pets],
            "active_pet_id": self._active_id,
        }

    def load(self, raw: dict[str, Any]) -> None:
        pets: list[PetInstance] = []
        seen: set[str] = set()
        for pet_raw in raw.get("owned_pets", []):
            pet = PetInstance.from_dict(pet_raw)
            if pet.pet_type in seen:
                logger.warning("Duplicate pet type in save ignored: %s", pet.pet_type)
                continue
            seen.add(pet.pet_type)
            pets.append(pet)
        self._pets = pets

        active_id = raw.get("active_pet_id")
        if active_id is not None and self.get(active_id) is None:
            logger.warning("Active pet %s missing from save", active_id)
            active_id = None
        if active_id is None and self._pets:
            active_id = self._pets[0].instance_id
        self._active_id = active_id

    def clear_all(self) -> None:
        self._pets = []
        self._active_id = None

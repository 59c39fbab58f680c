"""펫 도메인 모델 (DB 무관)"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Optional


class PetStatus(str, Enum):
    SLEEPING = "sleeping"
    IDLE = "idle"
    HAPPY = "happy"
    PLAYING = "playing"
    HUNTING = "hunting"
    TIRED = "tired"
    SAD = "sad"
    EATING = "eating"


class PassiveEffect(str, Enum):
    EXPLORE_TIME_REDUCE = "explore_time_reduce"
    HUNT_REWARD_BOOST = "hunt_reward_boost"
    DEATH_CHANCE_REDUCE = "death_chance_reduce"


@dataclass(frozen=True)
class PassiveSkill:
    name: str
    effect: PassiveEffect
    value: float


@dataclass(frozen=True)
class BaseStats:
    hunger: int
    mood: int
    health: int
    max_hunger: int = 100
    max_mood: int = 100
    max_health: int = 100


@dataclass(frozen=True)
class PetType:
    """펫 종류 원형 — 불변. pet_types.json에서 로드."""

    pet_type: str  # "cat"|"bird"|"fox"|"dragon"
    catalog_id: int
    name: str
    rarity: str
    base_stats: BaseStats
    passive_skill: Optional[PassiveSkill] = None
    is_starter: bool = False


@dataclass
class PetInstance:
    """보유 펫 개체.

    활성 펫의 개체가 곧 실시간 상태 레코드다 (별도 사본/동기화 없음).
    비활성 펫은 마지막 값 그대로 멈춰 있다.
    """

    instance_id: str
    pet_type: str
    name: str

    hunger: int
    mood: int
    health: int
    max_hunger: int = 100
    max_mood: int = 100
    max_health: int = 100

    level: int = 1
    experience: int = 0

    status: PetStatus = PetStatus.IDLE
    is_at_home: bool = True
    is_dead: bool = False

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "PetInstance":
        return cls(
            instance_id=raw["instance_id"],
            pet_type=raw["pet_type"],
            name=raw.get("name", raw["pet_type"]),
            hunger=int(raw["hunger"]),
            mood=int(raw["mood"]),
            health=int(raw["health"]),
            max_hunger=int(raw.get("max_hunger", 100)),
            max_mood=int(raw.get("max_mood", 100)),
            max_health=int(raw.get("max_health", 100)),
            level=int(raw.get("level", 1)),
            experience=int(raw.get("experience", 0)),
            status=PetStatus(raw.get("status", "idle")),
            is_at_home=bool(raw.get("is_at_home", True)),
            is_dead=bool(raw.get("is_dead", False)),
        )

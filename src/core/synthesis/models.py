"""합성 세션 모델"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class SynthesisPhase(str, Enum):
    IDLE = "idle"
    PREPARING = "preparing"
    FUSING = "fusing"
    BURST = "burst"
    RESULT = "result"


@dataclass
class FragmentSlot:
    fragment_type: str
    quantity: int


@dataclass
class SynthesisSlots:
    """배치된 재료. 예약이 아니라 '주장'일 뿐이라 실행 시 장부로 재검증한다."""

    fragments: list[FragmentSlot] = field(default_factory=list)
    potion_rarity: Optional[str] = None

    @property
    def placed_fragment_count(self) -> int:
        return sum(f.quantity for f in self.fragments)

    def clear(self) -> None:
        self.fragments = []
        self.potion_rarity = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "fragments": [
                {"type": f.fragment_type, "quantity": f.quantity}
                for f in self.fragments
            ],
            "potion": {"rarity": self.potion_rarity} if self.potion_rarity else None,
        }


@dataclass
class SynthesisResult:
    success: bool
    recipe_id: int
    message: str
    pet_type: Optional[str] = None
    pet_instance_id: Optional[str] = None
    already_owned: bool = False
    fail_count: int = 0
    pity_progress: int = 0
    pity_threshold: int = 0
    pity_active: bool = False
    success_rate: float = 0.0
    roll: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "recipe_id": self.recipe_id,
            "message": self.message,
            "pet_type": self.pet_type,
            "pet_instance_id": self.pet_instance_id,
            "already_owned": self.already_owned,
            "fail_count": self.fail_count,
            "pity_progress": self.pity_progress,
            "pity_threshold": self.pity_threshold,
            "pity_active": self.pity_active,
            "success_rate": self.success_rate,
        }

"""수치 감소 — 주기 틱 + 오프라인 일괄 적용

주기 틱 1회 = 1분. 오프라인 k분 일괄 적용은 틱 k회 연속 적용과 같은 결과를 낸다:
- 감소량은 0에서 멈추므로 max(0, x - k*d) == 틱 k회 결과
- 상태 전이는 단조 감소하는 최종 값 기준으로 한 번 판정해도 같다
"""

import logging
from dataclasses import dataclass

from .models import PetInstance, PetStatus

logger = logging.getLogger(__name__)

# === 틱당 감소량 ===
HUNGER_DECAY_AT_HOME = 1
HUNGER_DECAY_OUTDOOR = 2
MOOD_DECAY = 5

# === 상태 전이 기준 ===
TIRED_THRESHOLD = 20  # 포만감 미만 → tired
SAD_THRESHOLD = 20  # 기분 미만 → sad (tired가 우선)


@dataclass(frozen=True)
class DecayResult:
    minutes: int
    old_hunger: int
    new_hunger: int
    old_mood: int
    new_mood: int

    @property
    def became_hungry(self) -> bool:
        return self.new_hunger < TIRED_THRESHOLD <= self.old_hunger

    @property
    def became_sad(self) -> bool:
        return self.new_mood < SAD_THRESHOLD <= self.old_mood


def hunger_decay_per_tick(pet: PetInstance) -> int:
    return HUNGER_DECAY_AT_HOME if pet.is_at_home else HUNGER_DECAY_OUTDOOR


def _apply_status_thresholds(pet: PetInstance) -> None:
    if pet.hunger < TIRED_THRESHOLD:
        pet.status = PetStatus.TIRED
    if pet.mood < SAD_THRESHOLD and pet.status != PetStatus.TIRED:
        pet.status = PetStatus.SAD


def apply_decay_tick(pet: PetInstance) -> DecayResult:
    """주기 틱 1회 적용."""
    return apply_offline_decay(pet, 1)


def apply_offline_decay(pet: PetInstance, minutes: int) -> DecayResult:
    """k분 감소를 한 번에 적용. minutes <= 0이면 변화 없음."""
    old_hunger, old_mood = pet.hunger, pet.mood
    if minutes <= 0:
        return DecayResult(0, old_hunger, old_hunger, old_mood, old_mood)

    pet.hunger = max(0, pet.hunger - hunger_decay_per_tick(pet) * minutes)
    pet.mood = max(0, pet.mood - MOOD_DECAY * minutes)
    _apply_status_thresholds(pet)

    if minutes > 1:
        logger.info(
            "Offline decay %d min: hunger %d→%d, mood %d→%d",
            minutes,
            old_hunger,
            pet.hunger,
            old_mood,
            pet.mood,
        )
    return DecayResult(minutes, old_hunger, pet.hunger, old_mood, pet.mood)

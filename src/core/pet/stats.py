"""펫 수치 조작 — 먹이, 기분, 경험치, 귀가"""

import logging
from typing import Optional

from .models import PetInstance, PetStatus

logger = logging.getLogger(__name__)

# === 경험치 ===
EXP_PER_LEVEL = 100

# === 먹이 ===
DEFAULT_MOOD_INCREASE = 5  # mood_value 없는 음식의 기분 증가량
EATING_DURATION_SECONDS = 3.0  # eating → idle 복귀까지

# === 기분 ===
HAPPY_THRESHOLD = 70  # 이 값 이상이면 행복 조각 판정
HUNGRY_THRESHOLD = 30


def clamp(value: float, low: float, high: float) -> int:
    return int(max(low, min(high, value)))


def feed_block_reason(pet: Optional[PetInstance]) -> Optional[str]:
    """먹이를 줄 수 없는 이유. 가능하면 None."""
    if pet is None:
        return "no_active_pet"
    if pet.is_dead:
        return "pet_dead"
    if not pet.is_at_home:
        return "not_at_home"
    if pet.hunger >= pet.max_hunger:
        return "already_full"
    return None


def apply_food(pet: PetInstance, food_value: int, mood_value: int = 0) -> dict[str, int]:
    """포만감/기분 증가 + eating 상태 진입.

    Returns:
        {"hunger_gain": int, "mood_gain": int}
    """
    old_hunger = pet.hunger
    old_mood = pet.mood
    mood_increase = mood_value if mood_value > 0 else DEFAULT_MOOD_INCREASE

    pet.status = PetStatus.EATING
    pet.hunger = clamp(pet.hunger + food_value, 0, pet.max_hunger)
    pet.mood = clamp(pet.mood + mood_increase, 0, pet.max_mood)

    logger.info("Pet %s fed: hunger %d→%d", pet.instance_id, old_hunger, pet.hunger)
    return {"hunger_gain": pet.hunger - old_hunger, "mood_gain": pet.mood - old_mood}


def finish_eating(pet: PetInstance) -> None:
    """eating 상태가 그대로일 때만 idle로 복귀."""
    if pet.status == PetStatus.EATING:
        pet.status = PetStatus.IDLE


def increase_mood(pet: PetInstance, amount: int) -> int:
    pet.mood = clamp(pet.mood + amount, 0, pet.max_mood)
    return pet.mood


def add_experience(pet: PetInstance, amount: int) -> int:
    """경험치 추가. 반환: 상승한 레벨 수.

    레벨 = 누적 경험치 // EXP_PER_LEVEL + 1
    """
    pet.experience += amount
    new_level = pet.experience // EXP_PER_LEVEL + 1
    gained = 0
    if new_level > pet.level:
        gained = new_level - pet.level
        pet.level = new_level
        logger.info("Pet %s leveled up to %d", pet.instance_id, new_level)
    return gained


def level_progress(pet: PetInstance) -> int:
    """현재 레벨 진행도 (0~99)"""
    return pet.experience % EXP_PER_LEVEL


def send_outdoor(pet: PetInstance, status: PetStatus) -> None:
    pet.status = status
    pet.is_at_home = False


def recall_home(pet: PetInstance) -> None:
    """귀가. 사망한 펫은 tired 상태를 유지한다."""
    pet.is_at_home = True
    if not pet.is_dead:
        pet.status = PetStatus.IDLE

"""사냥 결과 판정

판정 순서:
1. 사망 확률 = 기본값 → 패시브(death_chance_reduce) → 버프(death_chance_reduce)
2. 사망: 체력 0, is_dead, tired. death_money_protect 버프 소비
3. 승리: 보상 = 기본 → 패시브 배율 → 버프 보너스(별도 집계)
   경험치 = 기본 × exp_boost, 체력이 낮으면 auto_heal 소비
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Optional

from src.core.buffs import BuffRegistry, BuffType
from src.core.pet.collection import PetCollection
from src.core.pet.models import PassiveEffect, PetInstance, PetStatus

logger = logging.getLogger(__name__)

BASE_DEATH_CHANCE = 0.10
REWARD_MIN = 50
REWARD_MAX = 100
HUNT_EXP = 25
AUTO_HEAL_THRESHOLD = 30  # 버프에 threshold가 없을 때 기준


@dataclass
class HuntOutcome:
    died: bool
    death_chance: float
    roll: float
    money_protected: bool = False
    base_reward: int = 0
    reward: int = 0  # 패시브 적용 후
    buff_bonus: int = 0  # hunt_reward_boost 버프 보너스
    exp_gained: int = 0
    healed: int = 0
    buffs_consumed: list[str] = field(default_factory=list)

    @property
    def total_reward(self) -> int:
        return self.reward + self.buff_bonus

    def to_dict(self) -> dict:
        return {
            "died": self.died,
            "death_chance": self.death_chance,
            "money_protected": self.money_protected,
            "base_reward": self.base_reward,
            "reward": self.reward,
            "buff_bonus": self.buff_bonus,
            "total_reward": self.total_reward,
            "exp_gained": self.exp_gained,
            "healed": self.healed,
            "buffs_consumed": list(self.buffs_consumed),
        }


def effective_death_chance(
    collection: PetCollection, buffs: BuffRegistry, consumed: list[str]
) -> float:
    chance = collection.apply_passive_skill_effect(
        PassiveEffect.DEATH_CHANCE_REDUCE, BASE_DEATH_CHANCE
    )
    buff = buffs.consume(BuffType.DEATH_CHANCE_REDUCE)
    if buff is not None:
        consumed.append(buff.buff_type.value)
        chance = max(0.0, chance - buff.value)
    return chance


def resolve_hunt_outcome(
    pet: PetInstance,
    collection: PetCollection,
    buffs: BuffRegistry,
    rng: random.Random,
) -> HuntOutcome:
    """사냥 완료 시점 판정. 펫 상태와 버프를 갱신한다.

    재화/경험치 지급은 호출 쪽 책임 (HuntOutcome의 값을 사용).
    """
    consumed: list[str] = []
    death_chance = effective_death_chance(collection, buffs, consumed)
    roll = rng.random()

    if roll < death_chance:
        pet.health = 0
        pet.is_dead = True
        pet.status = PetStatus.TIRED

        protect = buffs.consume(BuffType.DEATH_MONEY_PROTECT)
        if protect is not None:
            consumed.append(protect.buff_type.value)

        logger.info(
            "Pet %s died in hunt (roll %.4f < %.4f)",
            pet.instance_id,
            roll,
            death_chance,
        )
        return HuntOutcome(
            died=True,
            death_chance=death_chance,
            roll=roll,
            money_protected=protect is not None,
            buffs_consumed=consumed,
        )

    base_reward = rng.randint(REWARD_MIN, REWARD_MAX)
    reward = math.floor(
        collection.apply_passive_skill_effect(
            PassiveEffect.HUNT_REWARD_BOOST, float(base_reward)
        )
    )

    buff_bonus = 0
    boost = buffs.consume(BuffType.HUNT_REWARD_BOOST)
    if boost is not None:
        consumed.append(boost.buff_type.value)
        buff_bonus = math.floor(reward * boost.value)

    exp = HUNT_EXP
    exp_buff = buffs.consume(BuffType.EXP_BOOST)
    if exp_buff is not None:
        consumed.append(exp_buff.buff_type.value)
        exp = math.floor(exp * exp_buff.value)

    healed = _try_auto_heal(pet, buffs, consumed)

    logger.info(
        "Pet %s won hunt: reward %d+%d, exp %d",
        pet.instance_id,
        reward,
        buff_bonus,
        exp,
    )
    return HuntOutcome(
        died=False,
        death_chance=death_chance,
        roll=roll,
        base_reward=base_reward,
        reward=reward,
        buff_bonus=buff_bonus,
        exp_gained=exp,
        healed=healed,
        buffs_consumed=consumed,
    )


def _try_auto_heal(
    pet: PetInstance, buffs: BuffRegistry, consumed: list[str]
) -> int:
    heal = buffs.find(BuffType.AUTO_HEAL)
    if heal is None:
        return 0

    threshold: Optional[float] = heal.threshold
    if threshold is None:
        threshold = AUTO_HEAL_THRESHOLD
    if pet.health >= threshold:
        return 0

    buffs.consume(BuffType.AUTO_HEAL)
    consumed.append(heal.buff_type.value)
    old = pet.health
    pet.health = min(pet.max_health, pet.health + int(heal.value))
    logger.info("Auto heal: %d→%d", old, pet.health)
    return pet.health - old

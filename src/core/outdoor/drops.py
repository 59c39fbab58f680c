"""조각 드롭 판정 — 순수 함수"""

import logging
import random
from enum import Enum
from typing import Mapping, Optional

logger = logging.getLogger(__name__)


class DropSource(str, Enum):
    FOREST = "forest"
    HUNT = "hunt"
    HAPPINESS = "happiness"


DROP_CHANCES: dict[DropSource, float] = {
    DropSource.FOREST: 0.10,
    DropSource.HUNT: 0.10,
    DropSource.HAPPINESS: 0.05,
}

FRAGMENT_DROP_WEIGHTS: dict[DropSource, dict[str, int]] = {
    DropSource.FOREST: {"cat": 50, "bird": 30, "fox": 15, "dragon": 5},
    DropSource.HUNT: {"cat": 30, "bird": 35, "fox": 25, "dragon": 10},
}

DEFAULT_FRAGMENT_TYPE = "cat"


def select_weighted_fragment(weights: Mapping[str, float], rng: random.Random) -> str:
    """가중치 테이블에서 조각 타입 1개 선택.

    총합 범위에서 난수를 뽑고 가중치를 순서대로 빼서 0 이하가 되는 항목을 고른다.
    """
    total = sum(weights.values())
    remainder = rng.random() * total
    for fragment_type, weight in weights.items():
        remainder -= weight
        if remainder <= 0:
            return fragment_type
    return DEFAULT_FRAGMENT_TYPE


def roll_fragment_drop(
    source: DropSource | str,
    rng: random.Random,
    current_pet_type: Optional[str] = None,
) -> Optional[str]:
    """드롭 판정. 반환: 조각 타입, 드롭 없으면 None.

    happiness 드롭은 가중치 없이 항상 현재 펫 자신의 조각.
    """
    source = DropSource(source)
    chance = DROP_CHANCES.get(source, 0.0)
    roll = rng.random()
    if roll >= chance:
        logger.debug("No drop (%s): %.4f >= %.2f", source.value, roll, chance)
        return None

    if source == DropSource.HAPPINESS:
        return current_pet_type or DEFAULT_FRAGMENT_TYPE

    weights = FRAGMENT_DROP_WEIGHTS.get(source)
    if not weights:
        return DEFAULT_FRAGMENT_TYPE
    fragment_type = select_weighted_fragment(weights, rng)
    logger.debug("Drop (%s): %s", source.value, fragment_type)
    return fragment_type

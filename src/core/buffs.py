"""버프 레지스트리 — 사용 횟수 기반 임시 효과

duration은 벽시계 시간이 아니라 남은 사용 횟수.
소비 이벤트 1회당 정확히 1 감소, 0이 되면 제거.
같은 타입의 버프는 동시에 하나만 활성 (중복 활성화 거부).
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)


class BuffType(str, Enum):
    HUNT_REWARD_BOOST = "hunt_reward_boost"
    DEATH_MONEY_PROTECT = "death_money_protect"
    AUTO_HEAL = "auto_heal"
    EXP_BOOST = "exp_boost"
    DEATH_CHANCE_REDUCE = "death_chance_reduce"
    HUNGER_COST_REDUCE = "hunger_cost_reduce"


@dataclass(frozen=True)
class BuffSpec:
    """아이템 카탈로그에 붙은 버프 원형 — 불변"""

    buff_type: BuffType
    value: float
    duration: int = 1
    threshold: Optional[float] = None  # auto_heal: 발동 체력 기준

    def to_buff(self) -> "Buff":
        return Buff(
            buff_type=self.buff_type,
            value=self.value,
            duration=self.duration,
            threshold=self.threshold,
        )

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "BuffSpec":
        return cls(
            buff_type=BuffType(raw["type"]),
            value=float(raw["value"]),
            duration=int(raw.get("duration", 1)),
            threshold=raw.get("threshold"),
        )


@dataclass
class Buff:
    """활성 버프. duration = 남은 사용 횟수."""

    buff_type: BuffType
    value: float
    duration: int
    threshold: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["type"] = self.buff_type.value
        del data["buff_type"]
        return data

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Buff":
        return cls(
            buff_type=BuffType(raw["type"]),
            value=float(raw["value"]),
            duration=int(raw["duration"]),
            threshold=raw.get("threshold"),
        )


class BuffRegistry:
    """활성 버프의 순서 있는 목록"""

    def __init__(self) -> None:
        self._buffs: list[Buff] = []

    def activate(self, buff: Buff) -> bool:
        """버프 활성화. 같은 타입이 이미 활성이면 거부 (False)."""
        if buff.duration <= 0:
            raise ValueError(f"Buff duration must be positive: {buff.duration}")
        if self.find(buff.buff_type) is not None:
            logger.info("Buff already active, rejected: %s", buff.buff_type.value)
            return False
        self._buffs.append(buff)
        logger.info(
            "Buff activated: %s (value=%s, uses=%d)",
            buff.buff_type.value,
            buff.value,
            buff.duration,
        )
        return True

    def find(self, buff_type: BuffType) -> Optional[Buff]:
        """타입이 일치하는 첫 버프 (변경 없음)"""
        for buff in self._buffs:
            if buff.buff_type == buff_type:
                return buff
        return None

    def has(self, buff_type: BuffType) -> bool:
        return self.find(buff_type) is not None

    def consume(self, buff_type: BuffType) -> Optional[Buff]:
        """버프 1회 소비. 반환: 소비 시점의 버프 값 사본, 없으면 None.

        duration을 1 감소시키고 0이 되면 목록에서 제거한다.
        """
        buff = self.find(buff_type)
        if buff is None:
            return None

        used = Buff(
            buff_type=buff.buff_type,
            value=buff.value,
            duration=buff.duration,
            threshold=buff.threshold,
        )
        buff.duration -= 1
        if buff.duration <= 0:
            self._buffs.remove(buff)
            logger.debug("Buff exhausted and removed: %s", buff_type.value)
        else:
            logger.debug(
                "Buff consumed: %s (remaining=%d)", buff_type.value, buff.duration
            )
        return used

    @property
    def active(self) -> list[Buff]:
        return list(self._buffs)

    def clear(self) -> None:
        self._buffs.clear()

    def to_list(self) -> list[dict[str, Any]]:
        return [b.to_dict() for b in self._buffs]

    def load(self, raw_list: list[dict[str, Any]]) -> None:
        """저장 데이터에서 복원. 같은 타입 중복은 첫 항목만 유지."""
        self._buffs = []
        for raw in raw_list:
            buff = Buff.from_dict(raw)
            if buff.duration <= 0:
                continue
            if self.find(buff.buff_type) is not None:
                logger.warning("Duplicate buff in save ignored: %s", buff.buff_type.value)
                continue
            self._buffs.append(buff)

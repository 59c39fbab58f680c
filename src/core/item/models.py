"""아이템 도메인 모델 (DB 무관)"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from src.core.buffs import BuffSpec


class ItemCategory(str, Enum):
    FOOD = "food"
    MOOD = "mood"
    COMBAT = "combat"
    CHARM = "charm"
    SPECIAL = "special"
    POTION = "potion"
    FRAGMENT = "fragment"


class Rarity(str, Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


@dataclass(frozen=True)
class ItemDefinition:
    """아이템 원형 — 불변. items.json / fragment_types.json에서 로드."""

    item_id: int  # 1~99 일반, 101~ 조각, 201~ 물약
    key: str  # "magic_cookie"
    category: ItemCategory
    rarity: Rarity

    price: int = 0
    food_value: int = 0
    mood_value: int = 0

    fragment_type: Optional[str] = None  # 조각 전용: 대응 펫 타입
    use_condition: Optional[str] = None  # "before_hunt"|"passive"|None
    buff: Optional[BuffSpec] = None

    name: str = ""

    @property
    def is_fragment(self) -> bool:
        return self.category == ItemCategory.FRAGMENT

    @property
    def stack_key(self) -> str:
        """스택 식별 키. 조각은 조각 타입, 그 외는 카탈로그 ID."""
        if self.is_fragment and self.fragment_type:
            return self.fragment_type
        return str(self.item_id)


@dataclass
class ItemStack:
    """인벤토리의 수량 묶음. quantity는 항상 1 이상."""

    item_id: int
    category: ItemCategory
    rarity: Rarity
    quantity: int

    key: str = ""
    fragment_type: Optional[str] = None
    food_value: int = 0
    mood_value: int = 0
    buff: Optional[BuffSpec] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def stack_key(self) -> str:
        if self.category == ItemCategory.FRAGMENT and self.fragment_type:
            return self.fragment_type
        return str(self.item_id)

    @classmethod
    def from_definition(cls, item: ItemDefinition, quantity: int) -> "ItemStack":
        return cls(
            item_id=item.item_id,
            category=item.category,
            rarity=item.rarity,
            quantity=quantity,
            key=item.key,
            fragment_type=item.fragment_type,
            food_value=item.food_value,
            mood_value=item.mood_value,
            buff=item.buff,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.item_id,
            "key": self.key,
            "category": self.category.value,
            "rarity": self.rarity.value,
            "quantity": self.quantity,
            "food_value": self.food_value,
            "mood_value": self.mood_value,
        }
        if self.fragment_type is not None:
            data["fragment_type"] = self.fragment_type
        if self.buff is not None:
            buff = {
                "type": self.buff.buff_type.value,
                "value": self.buff.value,
                "duration": self.buff.duration,
            }
            if self.buff.threshold is not None:
                buff["threshold"] = self.buff.threshold
            data["buff"] = buff
        return data

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ItemStack":
        buff_raw = raw.get("buff")
        return cls(
            item_id=int(raw["id"]),
            category=ItemCategory(raw["category"]),
            rarity=Rarity(raw.get("rarity", "common")),
            quantity=int(raw["quantity"]),
            key=raw.get("key", ""),
            fragment_type=raw.get("fragment_type"),
            food_value=int(raw.get("food_value", 0)),
            mood_value=int(raw.get("mood_value", 0)),
            buff=BuffSpec.from_dict(buff_raw) if buff_raw else None,
        )

"""아이템 원형 저장소 — JSON 로드"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from src.core.buffs import BuffSpec

from .models import ItemCategory, ItemDefinition, Rarity

logger = logging.getLogger(__name__)


class ItemRegistry:
    """
    아이템 원형 저장소.
    일반 아이템(items.json) + 조각(fragment_types.json) 관리.
    """

    def __init__(self) -> None:
        self._items: dict[int, ItemDefinition] = {}

    def load_from_json(self, path: str | Path) -> int:
        """items.json 로드. 반환: 로드된 수량.

        buff는 dict → BuffSpec, category/rarity는 문자열 → enum 변환.
        """
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            raw_list: list[dict] = json.load(f)

        count = 0
        for raw in raw_list:
            try:
                buff_raw = raw.get("buff")
                item = ItemDefinition(
                    item_id=int(raw["item_id"]),
                    key=raw["key"],
                    category=ItemCategory(raw["category"]),
                    rarity=Rarity(raw["rarity"]),
                    price=int(raw.get("price", 0)),
                    food_value=int(raw.get("food_value", 0)),
                    mood_value=int(raw.get("mood_value", 0)),
                    use_condition=raw.get("use_condition"),
                    buff=BuffSpec.from_dict(buff_raw) if buff_raw else None,
                    name=raw.get("name", raw["key"]),
                )
                self.register(item)
                count += 1
            except (KeyError, ValueError) as e:
                logger.warning(
                    "Failed to load item: %s — %s", raw.get("item_id", "?"), e
                )

        logger.info("Loaded %d items from %s", count, path)
        return count

    def load_fragments_from_json(self, path: str | Path) -> int:
        """fragment_types.json 로드. 조각은 항상 FRAGMENT 카테고리."""
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            raw_list: list[dict] = json.load(f)

        count = 0
        for raw in raw_list:
            try:
                item = ItemDefinition(
                    item_id=int(raw["item_id"]),
                    key=raw["key"],
                    category=ItemCategory.FRAGMENT,
                    rarity=Rarity(raw["rarity"]),
                    fragment_type=raw["fragment_type"],
                    name=raw.get("name", raw["key"]),
                )
                self.register(item)
                count += 1
            except (KeyError, ValueError) as e:
                logger.warning(
                    "Failed to load fragment: %s — %s", raw.get("item_id", "?"), e
                )

        logger.info("Loaded %d fragment types from %s", count, path)
        return count

    def register(self, item: ItemDefinition) -> None:
        """이미 존재하는 item_id면 경고 로그 후 덮어쓴다."""
        if item.item_id in self._items:
            logger.warning("Overwriting existing item: %s", item.item_id)
        self._items[item.item_id] = item

    def get(self, item_id: int) -> Optional[ItemDefinition]:
        return self._items.get(item_id)

    def get_by_key(self, key: str) -> Optional[ItemDefinition]:
        for item in self._items.values():
            if item.key == key:
                return item
        return None

    def get_fragment(self, fragment_type: str) -> Optional[ItemDefinition]:
        for item in self._items.values():
            if item.is_fragment and item.fragment_type == fragment_type:
                return item
        return None

    def get_potion(self, rarity: Rarity | str) -> Optional[ItemDefinition]:
        rarity = Rarity(rarity)
        for item in self._items.values():
            if item.category == ItemCategory.POTION and item.rarity == rarity:
                return item
        return None

    def get_all(self) -> list[ItemDefinition]:
        return list(self._items.values())

    def search_by_category(self, category: ItemCategory) -> list[ItemDefinition]:
        return [i for i in self._items.values() if i.category == category]

    def count(self) -> int:
        return len(self._items)

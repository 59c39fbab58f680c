"""인벤토리 장부 — 수량 스택 관리

규칙:
- 스택 식별 키: 조각은 조각 타입, 그 외는 카탈로그 ID
- quantity가 0이 된 스택은 즉시 제거 (0 수량 스택은 저장되지 않는다)
- remove는 원자적: 부족하면 아무것도 바꾸지 않고 False
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from .models import ItemCategory, ItemDefinition, ItemStack, Rarity

logger = logging.getLogger(__name__)


class InventoryLedger:
    """조각 + 소모품 수량 장부"""

    def __init__(self) -> None:
        self._stacks: list[ItemStack] = []

    # === 기본 계약 ===

    def add_stack(self, item: ItemDefinition, quantity: int = 1) -> ItemStack:
        """같은 키 스택이 있으면 합치고, 없으면 새 스택 추가."""
        if quantity <= 0:
            raise ValueError(f"Quantity must be positive: {quantity}")

        existing = self._find(item.stack_key)
        if existing is not None:
            existing.quantity += quantity
            logger.debug("Stack %s increased to %d", item.stack_key, existing.quantity)
            return existing

        stack = ItemStack.from_definition(item, quantity)
        self._stacks.append(stack)
        logger.debug("New stack %s x%d", item.stack_key, quantity)
        return stack

    def remove_stack(self, key: str | int, quantity: int = 1) -> bool:
        """스택 수량 감소. 스택이 없거나 수량 부족이면 False (변경 없음)."""
        if quantity <= 0:
            raise ValueError(f"Quantity must be positive: {quantity}")

        stack = self._find(str(key))
        if stack is None:
            logger.info("Remove failed: stack %s not found", key)
            return False
        if stack.quantity < quantity:
            logger.info(
                "Remove failed: stack %s has %d < %d", key, stack.quantity, quantity
            )
            return False

        stack.quantity -= quantity
        if stack.quantity == 0:
            self._stacks.remove(stack)
            logger.debug("Stack %s emptied and removed", key)
        return True

    def query(self, predicate: Callable[[ItemStack], bool]) -> list[ItemStack]:
        """조건에 맞는 스택 목록 (변경 없음)."""
        return [s for s in self._stacks if predicate(s)]

    # === 조회 보조 ===

    def _find(self, key: str) -> Optional[ItemStack]:
        for stack in self._stacks:
            if stack.stack_key == key:
                return stack
        return None

    def get(self, key: str | int) -> Optional[ItemStack]:
        return self._find(str(key))

    def count(self, key: str | int) -> int:
        stack = self._find(str(key))
        return stack.quantity if stack else 0

    @property
    def stacks(self) -> list[ItemStack]:
        return list(self._stacks)

    @property
    def total_items(self) -> int:
        return sum(s.quantity for s in self._stacks)

    # === 조각 ===

    def fragment_counts(self) -> dict[str, int]:
        """{"cat": 5, "bird": 3, ...}"""
        counts: dict[str, int] = {}
        for stack in self.query(lambda s: s.category == ItemCategory.FRAGMENT):
            if stack.fragment_type is None:
                continue
            counts[stack.fragment_type] = (
                counts.get(stack.fragment_type, 0) + stack.quantity
            )
        return counts

    def fragment_count(self, fragment_type: str) -> int:
        return self.fragment_counts().get(fragment_type, 0)

    def has_enough_fragments(self, fragment_type: str, count: int) -> bool:
        return self.fragment_count(fragment_type) >= count

    def remove_fragments(self, fragment_type: str, count: int) -> bool:
        return self.remove_stack(fragment_type, count)

    # === 물약 ===

    def find_potion(self, rarity: Rarity | str) -> Optional[ItemStack]:
        rarity = Rarity(rarity)
        matches = self.query(
            lambda s: s.category == ItemCategory.POTION and s.rarity == rarity
        )
        return matches[0] if matches else None

    # === 저장 ===

    def to_list(self) -> list[dict[str, Any]]:
        return [s.to_dict() for s in self._stacks]

    def load(self, raw_list: list[dict[str, Any]]) -> None:
        """저장 데이터에서 복원. 수량 0 이하 스택은 버리고 같은 키는 합친다."""
        self._stacks = []
        for raw in raw_list:
            stack = ItemStack.from_dict(raw)
            if stack.quantity <= 0:
                logger.warning("Dropping non-positive stack from save: %s", raw)
                continue
            existing = self._find(stack.stack_key)
            if existing is not None:
                existing.quantity += stack.quantity
            else:
                self._stacks.append(stack)

    def clear(self) -> None:
        self._stacks.clear()

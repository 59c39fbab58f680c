"""아이템 사용 — 버프 아이템 활성화"""

import logging
from typing import Optional

from src.core.buffs import Buff, BuffRegistry

from .inventory import InventoryLedger

logger = logging.getLogger(__name__)


def activate_item_buff(
    ledger: InventoryLedger,
    buffs: BuffRegistry,
    item_key: str | int,
) -> Optional[Buff]:
    """버프 아이템 1개를 소비하고 버프를 활성화.

    실패 조건 (아무것도 소비하지 않음):
    - 인벤토리에 없음
    - 버프가 없는 아이템
    - 같은 타입 버프가 이미 활성
    """
    stack = ledger.get(item_key)
    if stack is None or stack.buff is None:
        logger.info("Item %s has no activatable buff", item_key)
        return None

    if buffs.has(stack.buff.buff_type):
        logger.info(
            "Item %s rejected: buff %s already active",
            item_key,
            stack.buff.buff_type.value,
        )
        return None

    spec = stack.buff
    if not ledger.remove_stack(item_key, 1):
        return None

    buff = spec.to_buff()
    buffs.activate(buff)
    return buff

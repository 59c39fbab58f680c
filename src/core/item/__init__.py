"""아이템/인벤토리 Core — 순수 Python, DB 무관"""

from .models import ItemCategory, ItemDefinition, ItemStack, Rarity
from .registry import ItemRegistry
from .inventory import InventoryLedger
from .usage import activate_item_buff

__all__ = [
    "ItemCategory",
    "ItemDefinition",
    "ItemStack",
    "Rarity",
    "ItemRegistry",
    "InventoryLedger",
    "activate_item_buff",
]

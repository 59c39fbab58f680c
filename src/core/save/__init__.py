"""세이브 스키마 + 버전 관리"""

from src.core.save.schemas import (
    CollectionSection,
    GameSection,
    InventorySection,
    OutdoorSection,
    PetRecord,
    SaveData,
    SaveMeta,
    SaveSlotInfo,
    SynthesisSection,
)
from src.core.save.versioning import (
    CURRENT_SAVE_VERSION,
    MIGRATIONS,
    migrate_save_if_needed,
    validate_save_data,
)

__all__ = [
    "SaveMeta",
    "PetRecord",
    "GameSection",
    "InventorySection",
    "OutdoorSection",
    "SynthesisSection",
    "CollectionSection",
    "SaveData",
    "SaveSlotInfo",
    "CURRENT_SAVE_VERSION",
    "MIGRATIONS",
    "migrate_save_if_needed",
    "validate_save_data",
]

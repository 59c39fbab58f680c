"""펫 Core 패키지"""

from src.core.pet.collection import PetCollection
from src.core.pet.decay import DecayResult, apply_decay_tick, apply_offline_decay
from src.core.pet.models import (
    BaseStats,
    PassiveEffect,
    PassiveSkill,
    PetInstance,
    PetStatus,
    PetType,
)
from src.core.pet.registry import PetTypeRegistry

__all__ = [
    # models
    "PetStatus",
    "PassiveEffect",
    "PassiveSkill",
    "BaseStats",
    "PetType",
    "PetInstance",
    # stores
    "PetTypeRegistry",
    "PetCollection",
    # decay
    "DecayResult",
    "apply_decay_tick",
    "apply_offline_decay",
]

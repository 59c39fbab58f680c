"""합성 Core 패키지"""

from src.core.synthesis.engine import PHASE_DELAYS, SynthesisEngine
from src.core.synthesis.models import (
    FragmentSlot,
    SynthesisPhase,
    SynthesisResult,
    SynthesisSlots,
)
from src.core.synthesis.recipes import (
    MAX_SUCCESS_RATE,
    PotionRequirement,
    Recipe,
    RecipeRegistry,
    UnlockRequirement,
    calculate_success_rate,
    check_unlock_requirement,
)

__all__ = [
    # recipes
    "Recipe",
    "PotionRequirement",
    "UnlockRequirement",
    "RecipeRegistry",
    "MAX_SUCCESS_RATE",
    "calculate_success_rate",
    "check_unlock_requirement",
    # session
    "SynthesisPhase",
    "FragmentSlot",
    "SynthesisSlots",
    "SynthesisResult",
    # engine
    "PHASE_DELAYS",
    "SynthesisEngine",
]

"""외출 활동 Core 패키지"""

from src.core.outdoor.drops import (
    DROP_CHANCES,
    FRAGMENT_DROP_WEIGHTS,
    DropSource,
    roll_fragment_drop,
    select_weighted_fragment,
)
from src.core.outdoor.hunt import BASE_DEATH_CHANCE, HuntOutcome, resolve_hunt_outcome
from src.core.outdoor.resolver import ActivityResolver, OutdoorArea, OutdoorSession

__all__ = [
    # drops
    "DropSource",
    "DROP_CHANCES",
    "FRAGMENT_DROP_WEIGHTS",
    "roll_fragment_drop",
    "select_weighted_fragment",
    # hunt
    "BASE_DEATH_CHANCE",
    "HuntOutcome",
    "resolve_hunt_outcome",
    # sessions
    "OutdoorArea",
    "OutdoorSession",
    "ActivityResolver",
]

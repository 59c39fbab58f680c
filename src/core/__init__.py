"""Crystal Pet Core"""
__version__ = "0.1.0"

from src.core.buffs import Buff, BuffRegistry, BuffSpec, BuffType
from src.core.catalog import CatalogRegistry, load_default_catalogs
from src.core.errors import (
    InvalidSlotError,
    InvariantViolationError,
    PetGameError,
    SaveDataError,
    SaveInProgressError,
    SaveNotFoundError,
    UnsupportedSaveVersionError,
)
from src.core.event_bus import EventBus, GameEvent
from src.core.event_types import EventTypes
from src.core.notification import Notification, NotificationCenter, NotificationLevel
from src.core.scheduler import AsyncioScheduler, ManualScheduler, Scheduler, TimerGroup
from src.core.wallet import Wallet

__all__ = [
    "Buff",
    "BuffRegistry",
    "BuffSpec",
    "BuffType",
    "CatalogRegistry",
    "load_default_catalogs",
    "PetGameError",
    "InvariantViolationError",
    "SaveDataError",
    "UnsupportedSaveVersionError",
    "InvalidSlotError",
    "SaveInProgressError",
    "SaveNotFoundError",
    "EventBus",
    "GameEvent",
    "EventTypes",
    "Notification",
    "NotificationCenter",
    "NotificationLevel",
    "Scheduler",
    "ManualScheduler",
    "AsyncioScheduler",
    "TimerGroup",
    "Wallet",
]

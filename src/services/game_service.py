"""게임 Service — 코어 저장소 조립 + 사용자 액션

저장소(장부, 컬렉션, 버프, 지갑)는 이 서비스가 한 벌만 만들어
합성 엔진과 외출 리졸버에 참조로 넘긴다.
모든 액션은 한 턴 안에서 동기적으로 끝나는 작업 단위다.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Optional

from src.core.buffs import Buff, BuffRegistry
from src.core.catalog import CatalogRegistry
from src.core.event_bus import EventBus, GameEvent
from src.core.event_types import EventTypes
from src.core.item.inventory import InventoryLedger
from src.core.item.models import ItemCategory
from src.core.item.usage import activate_item_buff
from src.core.notification import NotificationCenter
from src.core.outdoor.drops import DropSource
from src.core.outdoor.resolver import ActivityResolver, OutdoorArea
from src.core.pet import stats
from src.core.pet.collection import PetCollection
from src.core.pet.decay import DecayResult, apply_decay_tick, apply_offline_decay
from src.core.pet.models import PetInstance
from src.core.scheduler import Scheduler, TimerHandle
from src.core.synthesis.engine import SynthesisEngine
from src.core.wallet import INITIAL_MONEY, Wallet

logger = logging.getLogger(__name__)

# 새 게임 시작 아이템 (item_id, 수량)
STARTER_ITEMS: list[tuple[int, int]] = [(1, 3), (2, 2), (8, 1), (10, 1)]
# 새 게임 시작 조각 (조각 타입, 수량)
STARTER_FRAGMENTS: list[tuple[str, int]] = [("cat", 5), ("bird", 3)]

FEED_BLOCK_MESSAGES = {
    "no_active_pet": "No active pet",
    "pet_dead": "Your pet cannot eat right now",
    "not_at_home": "Your pet is not at home",
    "already_full": "Your pet is already full",
}


class PetGameService:
    """게임 상태 한 벌 + 액션 진입점"""

    def __init__(
        self,
        catalogs: CatalogRegistry,
        scheduler: Scheduler,
        rng: Optional[random.Random] = None,
        event_bus: Optional[EventBus] = None,
        notifications: Optional[NotificationCenter] = None,
    ) -> None:
        self.catalogs = catalogs
        self.scheduler = scheduler
        self.rng = rng or random.Random()
        self.bus = event_bus or EventBus()
        self.notifications = notifications or NotificationCenter(clock=scheduler.now)

        self.ledger = InventoryLedger()
        self.collection = PetCollection(catalogs.pets)
        self.buffs = BuffRegistry()
        self.wallet = Wallet()
        self.game_time = 0  # 분 단위, 감소 틱마다 +1

        self.synthesis = SynthesisEngine(
            recipes=catalogs.recipes,
            ledger=self.ledger,
            collection=self.collection,
            notifications=self.notifications,
            event_bus=self.bus,
            scheduler=scheduler,
            rng=self.rng,
        )
        self.outdoor = ActivityResolver(
            collection=self.collection,
            ledger=self.ledger,
            items=catalogs.items,
            buffs=self.buffs,
            wallet=self.wallet,
            notifications=self.notifications,
            event_bus=self.bus,
            scheduler=scheduler,
            rng=self.rng,
        )
        self._eating_timer: Optional[TimerHandle] = None

    # === 게임 수명 ===

    def new_game(self) -> None:
        """모든 상태 초기화 후 스타터 펫 + 시작 아이템 지급"""
        self.reset()
        self.wallet.money = INITIAL_MONEY
        self.collection.init_with_starter_pet()

        for item_id, quantity in STARTER_ITEMS:
            item = self.catalogs.get_item(item_id)
            if item is not None:
                self.ledger.add_stack(item, quantity)
        for fragment_type, quantity in STARTER_FRAGMENTS:
            fragment = self.catalogs.get_fragment_type(fragment_type)
            if fragment is not None:
                self.ledger.add_stack(fragment, quantity)

        logger.info("New game started")

    def reset(self) -> None:
        """타이머 취소 + 저장소 비우기 (카탈로그 제외)"""
        self._cancel_eating_timer()
        self.outdoor.clear_all()
        self.synthesis.clear_all()
        self.collection.clear_all()
        self.ledger.clear()
        self.buffs.clear()
        self.wallet.money = 0
        self.game_time = 0

    # === 조회 ===

    @property
    def active_pet(self) -> Optional[PetInstance]:
        return self.collection.active_pet

    def pet_state(self) -> Optional[dict[str, Any]]:
        pet = self.active_pet
        if pet is None:
            return None
        data = pet.to_dict()
        data["level_progress"] = stats.level_progress(pet)
        data["is_hungry"] = pet.hunger < stats.HUNGRY_THRESHOLD
        data["is_happy"] = pet.mood >= stats.HAPPY_THRESHOLD
        return data

    # === 먹이 ===

    def feed_pet(self, item_id: int) -> Optional[dict[str, int]]:
        """음식 1개 소비 → 포만감/기분 증가, 3초 뒤 idle 복귀.

        기분이 행복 기준 이상이 되면 행복 조각 드롭 판정.
        """
        pet = self.active_pet
        reason = stats.feed_block_reason(pet)
        if reason is not None or pet is None:
            self.notifications.warning(
                FEED_BLOCK_MESSAGES[reason or "no_active_pet"]
            )
            return None

        stack = self.ledger.get(item_id)
        if stack is None:
            self.notifications.warning("That item is not in your backpack")
            return None
        if stack.category not in (ItemCategory.FOOD, ItemCategory.MOOD):
            self.notifications.warning("That item cannot be eaten")
            return None

        food_value, mood_value = stack.food_value, stack.mood_value
        if not self.ledger.remove_stack(item_id, 1):
            return None

        gains = stats.apply_food(pet, food_value, mood_value)
        self._cancel_eating_timer()
        self._eating_timer = self.scheduler.call_later(
            stats.EATING_DURATION_SECONDS, lambda: stats.finish_eating(pet)
        )

        self.notifications.success(
            f"Fed {pet.name}: hunger +{gains['hunger_gain']}, "
            f"mood +{gains['mood_gain']}"
        )
        self.bus.emit(
            GameEvent(
                event_type=EventTypes.PET_FED,
                data={"instance_id": pet.instance_id, "item_id": item_id, **gains},
                source="game",
            )
        )

        if pet.mood >= stats.HAPPY_THRESHOLD:
            self.outdoor.award_drop(DropSource.HAPPINESS)
        return gains

    def _cancel_eating_timer(self) -> None:
        if self._eating_timer is not None:
            self._eating_timer.cancel()
            self._eating_timer = None

    # === 아이템 ===

    def use_item(self, item_id: int) -> Optional[Buff]:
        """버프 아이템 사용. 같은 타입 버프가 활성이면 거부 (아이템 유지)."""
        stack = self.ledger.get(item_id)
        if stack is None:
            self.notifications.warning("That item is not in your backpack")
            return None
        if stack.buff is None:
            self.notifications.warning("That item has no effect to activate")
            return None
        if self.buffs.has(stack.buff.buff_type):
            self.notifications.warning("That effect is already active")
            return None

        buff = activate_item_buff(self.ledger, self.buffs, item_id)
        if buff is None:
            return None

        self.notifications.success(f"{stack.key} activated")
        self.bus.emit(
            GameEvent(
                event_type=EventTypes.BUFF_ACTIVATED,
                data={"buff_type": buff.buff_type.value, "item_id": item_id},
                source="game",
            )
        )
        return buff

    # === 펫 ===

    def set_active_pet(self, instance_id: str) -> bool:
        if self.collection.get(instance_id) is None:
            self.notifications.warning("Pet not found")
            return False
        if not self.collection.set_active_pet(instance_id):
            self.notifications.warning("Cannot switch pets while one is outdoors")
            return False
        return True

    # === 외출 ===

    def send_to_play(self) -> bool:
        return self.outdoor.send_to_play()

    def send_to_hunt(self) -> bool:
        return self.outdoor.send_to_hunt()

    def recall(self, area: OutdoorArea | str) -> bool:
        return self.outdoor.recall(area)

    # === 시간 경과 ===

    def tick_decay(self) -> Optional[DecayResult]:
        """주기 감소 틱 1회 (1분 분량)"""
        self.game_time += 1
        pet = self.active_pet
        if pet is None or pet.is_dead:
            return None
        return apply_decay_tick(pet)

    def apply_offline_decay(self, minutes: int) -> Optional[DecayResult]:
        pet = self.active_pet
        if pet is None or pet.is_dead or minutes <= 0:
            return None

        result = apply_offline_decay(pet, minutes)
        if result.became_hungry:
            self.notifications.warning(
                f"{pet.name} got very hungry: "
                f"{result.old_hunger} → {result.new_hunger}"
            )
        if result.became_sad:
            self.notifications.warning(
                f"{pet.name} got sad: {result.old_mood} → {result.new_mood}"
            )
        return result

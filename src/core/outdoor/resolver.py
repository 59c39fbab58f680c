"""외출 활동 — 숲 놀이 / 사냥 세션

세션 한 건 = OutdoorSession + TimerGroup.
- 놀이: 완료 타이머 1개 (기본 3초 × 패시브)
- 사냥: 1초 간격 틱 5회 + 5초 뒤 완료 타이머
- 소환(recall)은 그룹 전체를 취소하고 효과 없이 귀가시킨다
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from src.core.buffs import BuffRegistry, BuffType
from src.core.event_bus import EventBus, GameEvent
from src.core.event_types import EventTypes
from src.core.item.inventory import InventoryLedger
from src.core.item.registry import ItemRegistry
from src.core.notification import NotificationCenter
from src.core.pet import stats
from src.core.pet.collection import PetCollection
from src.core.pet.models import PassiveEffect, PetInstance, PetStatus
from src.core.scheduler import Scheduler, TimerGroup
from src.core.wallet import Wallet

from .drops import DropSource, roll_fragment_drop
from .hunt import HuntOutcome, resolve_hunt_outcome

logger = logging.getLogger(__name__)

# === 놀이 ===
PLAY_BASE_DURATION = 3.0
PLAY_MOOD_GAIN = 10
PLAY_EXP_GAIN = 10

# === 사냥 ===
HUNT_DURATION = 5.0
HUNT_TICK_INTERVAL = 1.0
HUNT_TICK_COUNT = 5
HUNT_HEALTH_PER_TICK = 10
HUNT_HUNGER_PER_TICK = 5


class OutdoorArea(str, Enum):
    PLAY = "play"
    HUNT = "hunt"


@dataclass
class OutdoorSession:
    area: OutdoorArea
    pet_id: str
    snapshot: dict[str, Any]
    started_at: float
    duration: float
    group: Optional[TimerGroup] = field(default=None, repr=False)
    ticks_done: int = 0
    hunger_cost_factor: float = 1.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "pet_id": self.pet_id,
            "snapshot": dict(self.snapshot),
            "started_at": self.started_at,
            "duration": self.duration,
            "ticks_done": self.ticks_done,
        }


class ActivityResolver:
    def __init__(
        self,
        collection: PetCollection,
        ledger: InventoryLedger,
        items: ItemRegistry,
        buffs: BuffRegistry,
        wallet: Wallet,
        notifications: NotificationCenter,
        event_bus: EventBus,
        scheduler: Scheduler,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._collection = collection
        self._ledger = ledger
        self._items = items
        self._buffs = buffs
        self._wallet = wallet
        self._notify = notifications
        self._bus = event_bus
        self._scheduler = scheduler
        self._rng = rng or random.Random()
        self._sessions: dict[OutdoorArea, OutdoorSession] = {}
        self.last_hunt_outcome: Optional[HuntOutcome] = None

    # === 조회 ===

    def session(self, area: OutdoorArea | str) -> Optional[OutdoorSession]:
        return self._sessions.get(OutdoorArea(area))

    @property
    def is_pet_playing(self) -> bool:
        return OutdoorArea.PLAY in self._sessions

    @property
    def is_pet_hunting(self) -> bool:
        return OutdoorArea.HUNT in self._sessions

    def elapsed(self, area: OutdoorArea | str) -> float:
        session = self.session(area)
        if session is None:
            return 0.0
        return max(0.0, self._scheduler.now() - session.started_at)

    # === 출발 ===

    def _check_can_leave(self) -> Optional[PetInstance]:
        pet = self._collection.active_pet
        if pet is None:
            self._notify.warning("No active pet")
            return None
        if pet.is_dead:
            self._notify.warning(f"{pet.name} cannot go out")
            return None
        if not pet.is_at_home or self._sessions:
            self._notify.warning(f"{pet.name} is already outdoors")
            return None
        return pet

    def _open_session(
        self, area: OutdoorArea, pet: PetInstance, duration: float
    ) -> OutdoorSession:
        session = OutdoorSession(
            area=area,
            pet_id=pet.instance_id,
            snapshot=pet.to_dict(),
            started_at=self._scheduler.now(),
            duration=duration,
            group=TimerGroup(self._scheduler, name=f"{area.value}-{pet.instance_id}"),
        )
        self._sessions[area] = session
        return session

    def send_to_play(self) -> bool:
        pet = self._check_can_leave()
        if pet is None:
            return False

        duration = self._collection.apply_passive_skill_effect(
            PassiveEffect.EXPLORE_TIME_REDUCE, PLAY_BASE_DURATION
        )
        session = self._open_session(OutdoorArea.PLAY, pet, duration)
        stats.send_outdoor(pet, PetStatus.PLAYING)
        session.group.call_later(duration, lambda: self._finish_play(session))

        logger.info("Pet %s went to play (%.2fs)", pet.instance_id, duration)
        self._emit(
            EventTypes.PLAY_STARTED,
            {"instance_id": pet.instance_id, "duration": duration},
        )
        return True

    def send_to_hunt(self) -> bool:
        pet = self._check_can_leave()
        if pet is None:
            return False

        session = self._open_session(OutdoorArea.HUNT, pet, HUNT_DURATION)

        # 배고픔 소모 감소는 출발 시 소비, 이번 사냥 동안만 적용
        reduce = self._buffs.consume(BuffType.HUNGER_COST_REDUCE)
        if reduce is not None:
            session.hunger_cost_factor = max(0.0, 1 - reduce.value)
            self._emit_buff_consumed(reduce.buff_type.value)

        stats.send_outdoor(pet, PetStatus.HUNTING)
        for i in range(1, HUNT_TICK_COUNT + 1):
            session.group.call_later(
                HUNT_TICK_INTERVAL * i, lambda: self._hunt_tick(session)
            )
        session.group.call_later(HUNT_DURATION, lambda: self._finish_hunt(session))

        logger.info("Pet %s went hunting", pet.instance_id)
        self._emit(EventTypes.HUNT_STARTED, {"instance_id": pet.instance_id})
        return True

    # === 진행 ===

    def _hunt_tick(self, session: OutdoorSession) -> None:
        if session.ticks_done >= HUNT_TICK_COUNT:
            return
        pet = self._collection.get(session.pet_id)
        if pet is None:
            return
        hunger_cost = int(HUNT_HUNGER_PER_TICK * session.hunger_cost_factor)
        pet.health = max(0, pet.health - HUNT_HEALTH_PER_TICK)
        pet.hunger = max(0, pet.hunger - hunger_cost)
        session.ticks_done += 1
        logger.debug(
            "Hunt tick %d: health=%d hunger=%d",
            session.ticks_done,
            pet.health,
            pet.hunger,
        )

    def _close_session(self, session: OutdoorSession) -> None:
        if session.group is not None:
            session.group.cancel()
        if self._sessions.get(session.area) is session:
            del self._sessions[session.area]

    def _finish_play(self, session: OutdoorSession) -> None:
        pet = self._collection.get(session.pet_id)
        self._close_session(session)
        if pet is None:
            return

        stats.increase_mood(pet, PLAY_MOOD_GAIN)
        self._add_experience(pet, PLAY_EXP_GAIN)
        drop = self.award_drop(DropSource.FOREST)
        stats.recall_home(pet)

        self._notify.success(
            f"Play finished: mood +{PLAY_MOOD_GAIN}, exp +{PLAY_EXP_GAIN}"
        )
        self._emit(
            EventTypes.PLAY_FINISHED,
            {
                "instance_id": pet.instance_id,
                "mood_gain": PLAY_MOOD_GAIN,
                "exp_gain": PLAY_EXP_GAIN,
                "fragment": drop,
            },
        )

    def _finish_hunt(self, session: OutdoorSession) -> None:
        # 같은 시각 틱과 완료 순서가 바뀌어도 틱은 정확히 HUNT_TICK_COUNT회
        while session.ticks_done < HUNT_TICK_COUNT:
            self._hunt_tick(session)

        pet = self._collection.get(session.pet_id)
        self._close_session(session)
        if pet is None:
            return

        outcome = resolve_hunt_outcome(pet, self._collection, self._buffs, self._rng)
        for buff_type in outcome.buffs_consumed:
            self._emit_buff_consumed(buff_type)

        if outcome.died:
            if outcome.money_protected:
                self._notify.error(
                    f"{pet.name} fell in battle. The amulet kept your gold safe"
                )
            else:
                self._notify.error(f"{pet.name} fell in battle")
        else:
            self._wallet.earn(outcome.total_reward)
            self._add_experience(pet, outcome.exp_gained)
            bonus = f" (+{outcome.buff_bonus} bonus)" if outcome.buff_bonus else ""
            self._notify.success(
                f"Hunt won: {outcome.reward} gold{bonus}, exp +{outcome.exp_gained}"
            )

        drop = self.award_drop(DropSource.HUNT)
        # 사망한 펫도 세션은 닫고 집으로 옮긴다 (상태는 tired 유지)
        stats.recall_home(pet)

        data = {"instance_id": pet.instance_id, "fragment": drop, **outcome.to_dict()}
        if outcome.died:
            self._emit(EventTypes.PET_DIED, {"instance_id": pet.instance_id})
        self._emit(EventTypes.HUNT_FINISHED, data)
        self.last_hunt_outcome = outcome

    # === 보상 ===

    def _add_experience(self, pet: PetInstance, amount: int) -> None:
        gained = stats.add_experience(pet, amount)
        if gained:
            self._notify.success(f"{pet.name} reached level {pet.level}")
            self._emit(
                EventTypes.PET_LEVELED_UP,
                {"instance_id": pet.instance_id, "level": pet.level},
            )

    def award_drop(self, source: DropSource | str) -> Optional[str]:
        """드롭 판정 후 당첨 시 조각 1개를 인벤토리에 추가. 반환: 조각 타입."""
        active = self._collection.active_pet
        current_type = active.pet_type if active else None
        fragment_type = roll_fragment_drop(source, self._rng, current_type)
        if fragment_type is None:
            return None

        item = self._items.get_fragment(fragment_type)
        if item is None:
            logger.warning("Dropped fragment type not in catalog: %s", fragment_type)
            return None

        self._ledger.add_stack(item, 1)
        self._notify.success(f"Found a {item.name or fragment_type}!")
        self._emit(
            EventTypes.FRAGMENT_DROPPED,
            {"fragment_type": fragment_type, "source": DropSource(source).value},
        )
        return fragment_type

    # === 소환/정리 ===

    def recall(self, area: OutdoorArea | str) -> bool:
        """세션 취소 + 귀가. 보상/드롭/판정 없음."""
        area = OutdoorArea(area)
        session = self._sessions.get(area)
        if session is None:
            return False

        self._close_session(session)
        pet = self._collection.get(session.pet_id)
        if pet is not None:
            stats.recall_home(pet)

        logger.info("Pet %s recalled from %s", session.pet_id, area.value)
        self._notify.info("Your pet came home")
        self._emit(
            EventTypes.OUTDOOR_RECALLED,
            {"instance_id": session.pet_id, "area": area.value},
        )
        return True

    def clear_all(self) -> None:
        for session in list(self._sessions.values()):
            if session.group is not None:
                session.group.cancel()
        self._sessions.clear()
        self.last_hunt_outcome = None

    # === 저장 ===

    def to_dict(self) -> dict[str, Any]:
        play = self._sessions.get(OutdoorArea.PLAY)
        hunt = self._sessions.get(OutdoorArea.HUNT)
        return {
            "playing_pet": play.snapshot if play else None,
            "play_start_time": play.started_at if play else None,
            "hunting_pet": hunt.snapshot if hunt else None,
            "hunt_start_time": hunt.started_at if hunt else None,
        }

    def restore_sessions(self, raw: Optional[dict[str, Any]]) -> int:
        """저장 당시 진행 중이던 세션 처리.

        타이머는 저장되지 않으므로 세션은 재개하지 않고 취소한다:
        펫은 보상 없이 귀가. 반환: 취소된 세션 수.
        """
        self.clear_all()
        raw = raw or {}

        cancelled = 0
        for key in ("playing_pet", "hunting_pet"):
            snapshot = raw.get(key)
            if not snapshot:
                continue
            pet = self._collection.get(snapshot.get("instance_id", ""))
            if pet is not None:
                stats.recall_home(pet)
            cancelled += 1
            logger.info("Interrupted %s session cancelled on load", key)

        # 스냅샷 없이 외출 상태로 저장된 펫도 귀가
        for pet in self._collection.owned_pets:
            if not pet.is_at_home:
                stats.recall_home(pet)

        if cancelled:
            self._notify.info("Your pet came home while you were away")
        return cancelled

    def _emit(self, event_type: str, data: dict[str, Any]) -> None:
        self._bus.emit(GameEvent(event_type=event_type, data=data, source="outdoor"))

    def _emit_buff_consumed(self, buff_type: str) -> None:
        self._emit(EventTypes.BUFF_CONSUMED, {"buff_type": buff_type})

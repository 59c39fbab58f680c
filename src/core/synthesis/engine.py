"""합성 엔진 — 재료 배치, 단계 상태 머신, 성공/실패 판정, 천장 카운트

단계: idle → preparing → fusing → burst → result → idle
- 단계 전환은 주입된 스케줄러의 지연 콜백으로만 진행 (건너뛰기 없음)
- 한 번에 합성 1건 (is_synthesizing 가드)
- 성공률은 burst 시점의 실패 횟수로 새로 계산
- 성공: 조각 + 물약 소비, 실패 횟수 0, 펫 추가
- 실패: 물약만 소비, 실패 횟수 +1
"""

from __future__ import annotations

import logging
import random
from typing import Any, Callable, Optional

from src.core.errors import InvariantViolationError
from src.core.event_bus import EventBus, GameEvent
from src.core.event_types import EventTypes
from src.core.item.inventory import InventoryLedger
from src.core.notification import NotificationCenter
from src.core.pet.collection import PetCollection
from src.core.scheduler import Scheduler, TimerGroup

from .models import FragmentSlot, SynthesisPhase, SynthesisResult, SynthesisSlots
from .recipes import (
    Recipe,
    RecipeRegistry,
    calculate_success_rate,
    check_unlock_requirement,
)

logger = logging.getLogger(__name__)

# 각 단계에 머무는 시간 (초)
PHASE_DELAYS: dict[SynthesisPhase, float] = {
    SynthesisPhase.PREPARING: 0.5,
    SynthesisPhase.FUSING: 2.0,
    SynthesisPhase.BURST: 0.5,
}

FinishedCallback = Callable[[SynthesisResult], None]


class SynthesisEngine:
    def __init__(
        self,
        recipes: RecipeRegistry,
        ledger: InventoryLedger,
        collection: PetCollection,
        notifications: NotificationCenter,
        event_bus: EventBus,
        scheduler: Scheduler,
        rng: Optional[random.Random] = None,
        phase_delays: Optional[dict[SynthesisPhase, float]] = None,
    ) -> None:
        self._recipes = recipes
        self._ledger = ledger
        self._collection = collection
        self._notify = notifications
        self._bus = event_bus
        self._scheduler = scheduler
        self._rng = rng or random.Random()
        self._delays = dict(PHASE_DELAYS)
        if phase_delays:
            self._delays.update(phase_delays)

        self.selected_recipe_id: Optional[int] = None
        self.slots = SynthesisSlots()
        self.phase = SynthesisPhase.IDLE
        self.is_synthesizing = False
        self.result: Optional[SynthesisResult] = None
        self.fail_counts: dict[int, int] = {}

        self.on_finished: Optional[FinishedCallback] = None
        self._run: Optional[TimerGroup] = None
        self._pending_roll: Optional[tuple[float, float]] = None

    # === 조회 ===

    @property
    def selected_recipe(self) -> Optional[Recipe]:
        if self.selected_recipe_id is None:
            return None
        return self._recipes.get(self.selected_recipe_id)

    @property
    def player_level(self) -> int:
        """플레이어 레벨 = 활성 펫 레벨"""
        pet = self._collection.active_pet
        return pet.level if pet else 1

    def fail_count(self, recipe_id: int) -> int:
        return self.fail_counts.get(recipe_id, 0)

    def is_unlocked(self, recipe: Recipe) -> bool:
        return check_unlock_requirement(recipe, self._collection.owned_pet_types)

    def current_success_rate(self) -> float:
        recipe = self.selected_recipe
        if recipe is None:
            return 0.0
        return calculate_success_rate(
            recipe, self.fail_count(recipe.recipe_id), self.player_level
        )

    def pity_progress(self) -> tuple[int, int]:
        """(현재 주기 진행도, 임계치)"""
        recipe = self.selected_recipe
        if recipe is None:
            return (0, 0)
        fails = self.fail_count(recipe.recipe_id)
        return (fails % recipe.pity_threshold, recipe.pity_threshold)

    def is_pity_active(self) -> bool:
        recipe = self.selected_recipe
        if recipe is None:
            return False
        return self.fail_count(recipe.recipe_id) >= recipe.pity_threshold

    def _available_fragments(self, fragment_type: str) -> int:
        """장부 보유량에서 이미 배치한 양을 뺀 값"""
        staged = sum(
            f.quantity for f in self.slots.fragments if f.fragment_type == fragment_type
        )
        return self._ledger.fragment_count(fragment_type) - staged

    @property
    def can_synthesize(self) -> bool:
        """배치 재료 충족 + 장부가 실제로 보유 중인지 재검증"""
        recipe = self.selected_recipe
        if recipe is None or self.is_synthesizing:
            return False
        if self.slots.placed_fragment_count < recipe.fragment_count:
            return False
        if not self._ledger.has_enough_fragments(
            recipe.fragment_type, recipe.fragment_count
        ):
            return False
        if self.slots.potion_rarity != recipe.required_potion.rarity:
            return False
        potion = self._ledger.find_potion(recipe.required_potion.rarity)
        return potion is not None and potion.quantity >= recipe.required_potion.count

    # === 레시피 선택 ===

    def select_recipe(self, recipe_id: int) -> bool:
        """레시피 선택. 잠긴 레시피/합성 중이면 상태 변경 없이 False."""
        if self.is_synthesizing:
            self._notify.warning("Synthesis already in progress")
            return False

        recipe = self._recipes.get(recipe_id)
        if recipe is None:
            self._notify.error(f"Unknown recipe: {recipe_id}")
            return False

        if not self.is_unlocked(recipe):
            req = recipe.unlock_requirement
            needed = req.pet_type if req else "?"
            self._notify.warning(f"Recipe locked: requires owning a {needed}")
            logger.info("Locked recipe selected: %s", recipe_id)
            return False

        self.selected_recipe_id = recipe_id
        self.slots.clear()
        self.result = None
        self._set_phase(SynthesisPhase.IDLE)
        logger.info("Recipe selected: %s (%s)", recipe_id, recipe.name)
        return True

    # === 재료 배치 ===

    def add_fragment_to_slot(self, fragment_type: str, quantity: int = 1) -> bool:
        recipe = self.selected_recipe
        if recipe is None or self.is_synthesizing:
            self._notify.warning("Select a recipe first")
            return False
        if quantity <= 0:
            return False

        if fragment_type != recipe.fragment_type:
            self._notify.warning(f"This recipe needs {recipe.fragment_type} fragments")
            return False

        remaining = recipe.fragment_count - self.slots.placed_fragment_count
        if remaining <= 0:
            self._notify.info("Fragment slots are full")
            return False

        available = self._available_fragments(fragment_type)
        if available <= 0:
            self._notify.warning(f"Not enough {fragment_type} fragments")
            return False

        to_add = min(quantity, remaining, available)
        for slot in self.slots.fragments:
            if slot.fragment_type == fragment_type:
                slot.quantity += to_add
                break
        else:
            self.slots.fragments.append(FragmentSlot(fragment_type, to_add))

        logger.debug(
            "Staged %d %s fragments (%d/%d)",
            to_add,
            fragment_type,
            self.slots.placed_fragment_count,
            recipe.fragment_count,
        )
        return True

    def remove_fragment_from_slot(
        self, index: int, quantity: Optional[int] = None
    ) -> bool:
        """슬롯 index에서 quantity개 제거 (None이면 전부)."""
        if self.is_synthesizing:
            return False
        if index < 0 or index >= len(self.slots.fragments):
            self._notify.warning(f"Invalid fragment slot: {index}")
            return False

        slot = self.slots.fragments[index]
        if quantity is None or quantity >= slot.quantity:
            self.slots.fragments.pop(index)
        elif quantity <= 0:
            return False
        else:
            slot.quantity -= quantity
        return True

    def set_potion_slot(self, rarity: str) -> bool:
        recipe = self.selected_recipe
        if recipe is None or self.is_synthesizing:
            self._notify.warning("Select a recipe first")
            return False

        if rarity != recipe.required_potion.rarity:
            self._notify.warning(
                f"This recipe needs a {recipe.required_potion.rarity} potion"
            )
            return False

        if self._ledger.find_potion(rarity) is None:
            self._notify.warning(f"No {rarity} potion in backpack")
            return False

        self.slots.potion_rarity = rarity
        return True

    def remove_potion_from_slot(self) -> bool:
        if self.is_synthesizing or self.slots.potion_rarity is None:
            return False
        self.slots.potion_rarity = None
        return True

    def auto_fill_slots(self) -> bool:
        """보유 재료로 슬롯 자동 채우기. 모두 채웠으면 True."""
        recipe = self.selected_recipe
        if recipe is None or self.is_synthesizing:
            self._notify.warning("Select a recipe first")
            return False

        self.slots.clear()
        owned = self._ledger.fragment_count(recipe.fragment_type)
        if owned < recipe.fragment_count:
            self._notify.warning(
                f"Not enough {recipe.fragment_type} fragments "
                f"({owned}/{recipe.fragment_count})"
            )
            return False
        self.slots.fragments.append(
            FragmentSlot(recipe.fragment_type, recipe.fragment_count)
        )

        if self._ledger.find_potion(recipe.required_potion.rarity) is None:
            self._notify.warning(
                f"No {recipe.required_potion.rarity} potion in backpack"
            )
            return False
        self.slots.potion_rarity = recipe.required_potion.rarity
        return True

    def clear_slots(self) -> None:
        if self.is_synthesizing:
            return
        self.slots.clear()

    # === 실행 ===

    def start_synthesis(self) -> bool:
        """합성 시작. 진행 중이거나 재료 미충족이면 아무것도 바꾸지 않고 False."""
        if self.is_synthesizing:
            self._notify.warning("Synthesis already in progress")
            return False
        if not self.can_synthesize:
            self._notify.warning("Materials are not ready")
            return False

        recipe = self.selected_recipe
        if recipe is None:
            raise InvariantViolationError("Materials validated without a recipe")

        self.is_synthesizing = True
        self.result = None
        self._pending_roll = None
        self._run = TimerGroup(self._scheduler, name=f"synthesis-{recipe.recipe_id}")
        self._set_phase(SynthesisPhase.PREPARING)
        logger.info("Synthesis started: recipe %s", recipe.recipe_id)

        run = self._run
        t_fusing = self._delays[SynthesisPhase.PREPARING]
        t_burst = t_fusing + self._delays[SynthesisPhase.FUSING]
        t_result = t_burst + self._delays[SynthesisPhase.BURST]

        run.call_later(t_fusing, lambda: self._set_phase(SynthesisPhase.FUSING))
        run.call_later(t_burst, lambda: self._on_burst(recipe))
        run.call_later(t_result, lambda: self._on_result(recipe))
        return True

    def _on_burst(self, recipe: Recipe) -> None:
        self._set_phase(SynthesisPhase.BURST)
        rate = calculate_success_rate(
            recipe, self.fail_count(recipe.recipe_id), self.player_level
        )
        roll = self._rng.random()
        self._pending_roll = (roll, rate)
        logger.debug("Synthesis roll %.4f vs rate %.4f", roll, rate)

    def _on_result(self, recipe: Recipe) -> None:
        pending, self._pending_roll = self._pending_roll, None

        try:
            if pending is None:
                logger.error("Synthesis result reached without a roll")
                raise InvariantViolationError("Synthesis result reached without a roll")
            roll, rate = pending
            if roll < rate:
                result = self._resolve_success(recipe, rate, roll)
            else:
                result = self._resolve_failure(recipe, rate, roll)
        except InvariantViolationError:
            self.is_synthesizing = False
            self._run = None
            self._set_phase(SynthesisPhase.IDLE)
            raise

        self.result = result
        self.is_synthesizing = False
        self._run = None
        self._set_phase(SynthesisPhase.RESULT)

        if self.on_finished is not None:
            self.on_finished(result)

    def _consume(self, key: str, quantity: int, what: str) -> None:
        if not self._ledger.remove_stack(key, quantity):
            logger.error("Ledger cannot cover %s x%d after validation", what, quantity)
            raise InvariantViolationError(
                f"Ledger cannot cover {what} x{quantity} after validation"
            )

    def _consume_potion(self, recipe: Recipe) -> None:
        rarity = recipe.required_potion.rarity
        potion = self._ledger.find_potion(rarity)
        if potion is None:
            logger.error("Potion %s missing after validation", rarity)
            raise InvariantViolationError(f"Potion {rarity} missing after validation")
        self._consume(
            potion.stack_key, recipe.required_potion.count, f"{rarity} potion"
        )

    def _resolve_success(
        self, recipe: Recipe, rate: float, roll: float
    ) -> SynthesisResult:
        self._consume(recipe.fragment_type, recipe.fragment_count, "fragments")
        self._consume_potion(recipe)
        self.slots.clear()

        self.fail_counts[recipe.recipe_id] = 0
        already_owned = self._collection.is_pet_owned(recipe.target_pet_type)
        instance_id = self._collection.add_pet(recipe.target_pet_type)

        result = SynthesisResult(
            success=True,
            recipe_id=recipe.recipe_id,
            message=f"Synthesis succeeded: {recipe.target_pet_type}",
            pet_type=recipe.target_pet_type,
            pet_instance_id=instance_id,
            already_owned=already_owned,
            pity_threshold=recipe.pity_threshold,
            success_rate=rate,
            roll=roll,
        )
        logger.info(
            "Synthesis success: recipe %s → %s (%s)",
            recipe.recipe_id,
            recipe.target_pet_type,
            instance_id,
        )
        self._notify.success(result.message)
        self._bus.emit(
            GameEvent(
                event_type=EventTypes.PET_SYNTHESIZED,
                data={
                    "recipe_id": recipe.recipe_id,
                    "pet_type": recipe.target_pet_type,
                    "instance_id": instance_id,
                    "already_owned": already_owned,
                },
                source="synthesis",
            )
        )
        return result

    def _resolve_failure(
        self, recipe: Recipe, rate: float, roll: float
    ) -> SynthesisResult:
        # 조각은 성공 전까지 차감하지 않으므로 그대로 남는다
        self._consume_potion(recipe)
        self.slots.potion_rarity = None

        fails = self.fail_count(recipe.recipe_id) + 1
        self.fail_counts[recipe.recipe_id] = fails

        result = SynthesisResult(
            success=False,
            recipe_id=recipe.recipe_id,
            message="Synthesis failed, fragments were returned",
            fail_count=fails,
            pity_progress=fails % recipe.pity_threshold,
            pity_threshold=recipe.pity_threshold,
            pity_active=fails >= recipe.pity_threshold,
            success_rate=rate,
            roll=roll,
        )
        logger.info(
            "Synthesis failed: recipe %s (fails=%d, pity=%s)",
            recipe.recipe_id,
            fails,
            result.pity_active,
        )
        self._notify.info(result.message)
        self._bus.emit(
            GameEvent(
                event_type=EventTypes.SYNTHESIS_FAILED,
                data={
                    "recipe_id": recipe.recipe_id,
                    "fail_count": fails,
                    "pity_active": result.pity_active,
                },
                source="synthesis",
            )
        )
        return result

    def _set_phase(self, phase: SynthesisPhase) -> None:
        if phase == self.phase:
            return
        old = self.phase
        self.phase = phase
        logger.debug("Synthesis phase %s → %s", old.value, phase.value)
        self._bus.emit(
            GameEvent(
                event_type=EventTypes.SYNTHESIS_PHASE_CHANGED,
                data={"from": old.value, "to": phase.value},
                source="synthesis",
            )
        )

    # === 정리 ===

    def close_result(self) -> bool:
        """결과 확인 후 idle 복귀"""
        if self.phase != SynthesisPhase.RESULT:
            return False
        self.result = None
        self._set_phase(SynthesisPhase.IDLE)
        return True

    def reset_synthesis(self) -> None:
        """진행 중인 합성 취소 + 세션 초기화. 소비는 일어나지 않는다."""
        if self._run is not None:
            self._run.cancel()
            self._run = None
        self._pending_roll = None
        self.is_synthesizing = False
        self.result = None
        self.slots.clear()
        self._set_phase(SynthesisPhase.IDLE)

    def clear_all(self) -> None:
        self.reset_synthesis()
        self.selected_recipe_id = None
        self.fail_counts = {}

    # === 저장 ===

    def to_dict(self) -> dict[str, Any]:
        return {"fail_counts": {str(k): v for k, v in self.fail_counts.items()}}

    def load(self, raw: dict[str, Any]) -> None:
        self.reset_synthesis()
        self.selected_recipe_id = None
        counts: dict[int, int] = {}
        for key, value in (raw.get("fail_counts") or {}).items():
            try:
                count = int(value)
                if count > 0:
                    counts[int(key)] = count
            except (TypeError, ValueError):
                logger.warning("Invalid fail count entry in save: %s=%s", key, value)
        self.fail_counts = counts

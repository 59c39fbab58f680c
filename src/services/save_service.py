"""세이브 Service — 스냅샷 생성/적용 + 슬롯 저장소

슬롯 -1은 자동 저장, 0..N-1은 수동 슬롯.
쓰기는 한 트랜잭션: 커밋 또는 롤백. 실패해도 이전 세이브는 그대로 남는다.
"""

from __future__ import annotations

import logging
import math
import uuid
from typing import Any, Callable, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.buffs import BuffRegistry
from src.core.errors import (
    InvalidSlotError,
    SaveDataError,
    SaveInProgressError,
    SaveNotFoundError,
)
from src.core.event_bus import GameEvent
from src.core.event_types import EventTypes
from src.core.item.inventory import InventoryLedger
from src.core.pet.collection import PetCollection
from src.core.save.schemas import (
    CollectionSection,
    GameSection,
    InventorySection,
    OutdoorSection,
    SaveData,
    SaveMeta,
    SaveSlotInfo,
    SynthesisSection,
)
from src.core.save.versioning import (
    CURRENT_SAVE_VERSION,
    migrate_save_if_needed,
    validate_save_data,
)
from src.db.models import AUTO_SAVE_SLOT, SaveSlotModel
from src.services.game_service import PetGameService

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]

# 되돌릴 수 없는 결과. 발생 즉시 자동 저장한다.
MILESTONE_EVENTS = (
    EventTypes.PET_SYNTHESIZED,
    EventTypes.SYNTHESIS_FAILED,
    EventTypes.PET_DIED,
)


class SaveRepository:
    """슬롯 단위 영속화. 세션은 호출마다 열고 닫는다."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def load_snapshot(self, slot_index: int) -> Optional[dict[str, Any]]:
        with self._session_factory() as db:
            row = db.get(SaveSlotModel, slot_index)
            return dict(row.payload) if row is not None else None

    def save_snapshot(self, slot_index: int, data: dict[str, Any]) -> None:
        """슬롯 전체를 한 트랜잭션으로 교체"""
        meta = data.get("meta", {})
        with self._session_factory() as db:
            try:
                row = db.get(SaveSlotModel, slot_index)
                if row is None:
                    row = SaveSlotModel(slot_index=slot_index)
                    db.add(row)
                row.name = meta.get("name", "")
                row.version = int(meta.get("version", CURRENT_SAVE_VERSION))
                row.payload = data
                db.commit()
            except SQLAlchemyError:
                db.rollback()
                logger.exception("Failed to write save slot %d", slot_index)
                raise

    def delete_snapshot(self, slot_index: int) -> bool:
        with self._session_factory() as db:
            try:
                row = db.get(SaveSlotModel, slot_index)
                if row is None:
                    return False
                db.delete(row)
                db.commit()
                return True
            except SQLAlchemyError:
                db.rollback()
                logger.exception("Failed to delete save slot %d", slot_index)
                raise

    def list_snapshots(self) -> dict[int, dict[str, Any]]:
        with self._session_factory() as db:
            rows = db.query(SaveSlotModel).order_by(SaveSlotModel.slot_index).all()
            return {row.slot_index: dict(row.payload) for row in rows}


class SaveService:
    """게임 상태 ↔ 세이브 문서"""

    def __init__(
        self,
        game: PetGameService,
        repository: SaveRepository,
        slot_count: int = 3,
    ) -> None:
        self._game = game
        self._repo = repository
        self.slot_count = slot_count
        self.is_saving = False
        self.current_slot_index = AUTO_SAVE_SLOT
        self.last_save_time: Optional[float] = None
        self._created_at = game.scheduler.now()

        for event_type in MILESTONE_EVENTS:
            game.bus.subscribe(event_type, self._on_milestone)

    def _now(self) -> float:
        return self._game.scheduler.now()

    def _on_milestone(self, event: GameEvent) -> None:
        logger.info("Auto saving after %s", event.event_type)
        self.auto_save()

    # === 슬롯 검증 ===

    def _check_manual_slot(self, slot_index: int) -> None:
        if not 0 <= slot_index < self.slot_count:
            raise InvalidSlotError(f"Invalid save slot: {slot_index}")

    def _check_any_slot(self, slot_index: int) -> None:
        if slot_index != AUTO_SAVE_SLOT:
            self._check_manual_slot(slot_index)

    def _default_name(self, slot_index: int) -> str:
        if slot_index == AUTO_SAVE_SLOT:
            return "Auto Save"
        return f"Save {slot_index + 1}"

    # === 스냅샷 ===

    def create_snapshot(self, name: Optional[str] = None) -> dict[str, Any]:
        game = self._game
        now = self._now()
        pet = game.active_pet
        if pet is None:
            raise SaveDataError("Cannot save without an active pet")

        save = SaveData(
            meta=SaveMeta(
                id=f"save_{int(now * 1000)}_{uuid.uuid4().hex[:9]}",
                name=name or self._default_name(self.current_slot_index),
                version=CURRENT_SAVE_VERSION,
                created_at=self._created_at,
                updated_at=now,
                play_time=game.game_time,
            ),
            game=GameSection(
                money=game.wallet.money,
                game_time=game.game_time,
                pet=pet.to_dict(),
                active_buffs=game.buffs.to_list(),
            ),
            backpack=InventorySection(items=game.ledger.to_list()),
            outdoor=OutdoorSection(**game.outdoor.to_dict()),
            synthesis=SynthesisSection(**game.synthesis.to_dict()),
            collection=CollectionSection(**game.collection.to_dict()),
        )
        return save.model_dump()

    def _write(self, slot_index: int, name: Optional[str]) -> dict[str, Any]:
        snapshot = self.create_snapshot(name or self._default_name(slot_index))
        self._repo.save_snapshot(slot_index, snapshot)
        self.last_save_time = self._now()
        self._game.bus.emit(
            GameEvent(
                event_type=EventTypes.GAME_SAVED,
                data={"slot_index": slot_index},
                source="save",
            )
        )
        return snapshot

    def auto_save(self) -> bool:
        """자동 저장. 저장 중이면 건너뛰고, 실패는 로그만 남긴다."""
        if self.is_saving:
            return False
        self.is_saving = True
        try:
            self._write(AUTO_SAVE_SLOT, None)
            logger.debug("Auto save complete")
            return True
        except (SQLAlchemyError, SaveDataError):
            logger.exception("Auto save failed")
            return False
        finally:
            self.is_saving = False

    def save_to_slot(
        self, slot_index: int, name: Optional[str] = None
    ) -> SaveSlotInfo:
        self._check_manual_slot(slot_index)
        if self.is_saving:
            raise SaveInProgressError("A save is already in progress")

        self.is_saving = True
        try:
            snapshot = self._write(slot_index, name)
        finally:
            self.is_saving = False

        self.current_slot_index = slot_index
        logger.info("Saved to slot %d: %s", slot_index, snapshot["meta"]["name"])
        return self._slot_info(slot_index, snapshot)

    # === 불러오기 ===

    @staticmethod
    def parse_save(raw: Any) -> SaveData:
        """검증 → 마이그레이션 → 스키마 변환"""
        validate_save_data(raw)
        migrated = migrate_save_if_needed(raw)
        try:
            return SaveData.model_validate(migrated)
        except ValidationError as e:
            raise SaveDataError(f"Save data is invalid: {e}") from e

    def load_from_slot(self, slot_index: int) -> SaveData:
        self._check_any_slot(slot_index)
        raw = self._repo.load_snapshot(slot_index)
        if raw is None:
            raise SaveNotFoundError(f"Save slot {slot_index} is empty")

        save = self.parse_save(raw)
        self.apply_save_data(save)
        self.current_slot_index = slot_index
        logger.info("Loaded slot %d: %s", slot_index, save.meta.name)
        return save

    def load_last_save(self) -> bool:
        """자동 저장 불러오기. 없거나 손상이면 새 게임으로 시작하고 False."""
        try:
            self.load_from_slot(AUTO_SAVE_SLOT)
            return True
        except SaveNotFoundError:
            logger.info("No auto save found, starting a new game")
        except SaveDataError as e:
            logger.error("Auto save unusable (%s), starting a new game", e)
            self._game.notifications.error("Your last save could not be loaded")
        self._game.new_game()
        self._created_at = self._now()
        return False

    @staticmethod
    def _collection_payload(save: SaveData) -> dict[str, Any]:
        """활성 펫은 game.pet이 실시간 기록이라 컬렉션의 같은 개체를 대신한다"""
        live = save.game.pet.model_dump()
        pets = [
            p.model_dump()
            for p in save.collection.owned_pets
            if p.instance_id != live["instance_id"]
        ]
        pets.insert(0, live)
        return {"owned_pets": pets, "active_pet_id": live["instance_id"]}

    def apply_save_data(self, save: SaveData) -> None:
        """세이브 내용을 게임 상태에 적용하고 오프라인 감소를 반영"""
        game = self._game
        collection_raw = self._collection_payload(save)
        items = save.backpack.items
        buffs = save.game.active_buffs

        # 임시 저장소에 먼저 적재해 본다. 실패하면 현재 게임은 손대지 않는다.
        try:
            PetCollection(game.catalogs.pets).load(collection_raw)
            InventoryLedger().load(items)
            BuffRegistry().load(buffs)
        except (KeyError, TypeError, ValueError) as e:
            raise SaveDataError(f"Save contents are invalid: {e}") from e

        game.reset()
        game.wallet.money = save.game.money
        game.game_time = save.game.game_time
        game.collection.load(collection_raw)
        game.ledger.load(items)
        game.buffs.load(buffs)
        game.synthesis.load(save.synthesis.model_dump())
        game.outdoor.restore_sessions(save.outdoor.model_dump())

        self._created_at = save.meta.created_at
        offline_minutes = math.floor((self._now() - save.meta.updated_at) / 60)
        if offline_minutes > 0:
            game.apply_offline_decay(offline_minutes)
            hours, mins = divmod(offline_minutes, 60)
            away = f"{hours}h {mins}m" if hours else f"{mins} minutes"
            game.notifications.info(
                f"You were away for {away}; your pet's stats decayed"
            )

        self.last_save_time = self._now()
        game.bus.emit(
            GameEvent(
                event_type=EventTypes.GAME_LOADED,
                data={
                    "save_id": save.meta.id,
                    "offline_minutes": max(0, offline_minutes),
                },
                source="save",
            )
        )

    # === 슬롯 관리 ===

    def delete_slot(self, slot_index: int) -> bool:
        self._check_manual_slot(slot_index)
        deleted = self._repo.delete_snapshot(slot_index)
        if self.current_slot_index == slot_index:
            self.current_slot_index = AUTO_SAVE_SLOT
        return deleted

    def _slot_info(self, slot_index: int, raw: dict[str, Any]) -> SaveSlotInfo:
        meta = raw.get("meta", {})
        return SaveSlotInfo(
            slot_index=slot_index,
            name=meta.get("name", ""),
            version=int(meta.get("version", 1)),
            updated_at=float(meta.get("updated_at", 0.0)),
            play_time=int(meta.get("play_time", 0)),
        )

    def list_slots(self) -> list[Optional[SaveSlotInfo]]:
        """수동 슬롯 목록. 빈 슬롯은 None."""
        snapshots = self._repo.list_snapshots()
        return [
            self._slot_info(i, snapshots[i]) if i in snapshots else None
            for i in range(self.slot_count)
        ]

    def export_save(self, slot_index: int) -> dict[str, Any]:
        self._check_any_slot(slot_index)
        raw = self._repo.load_snapshot(slot_index)
        if raw is None:
            raise SaveNotFoundError(f"Save slot {slot_index} is empty")
        return raw

    def import_save(self, raw: Any, slot_index: int) -> SaveSlotInfo:
        """외부 세이브 문서를 검증/마이그레이션 후 슬롯에 기록"""
        self._check_manual_slot(slot_index)
        save = self.parse_save(raw)
        data = save.model_dump()
        self._repo.save_snapshot(slot_index, data)
        logger.info("Imported save into slot %d", slot_index)
        return self._slot_info(slot_index, data)

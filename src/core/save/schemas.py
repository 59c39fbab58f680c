"""세이브 데이터 스키마 (pydantic)

세이브 파일은 버전이 붙은 dict. 마이그레이션은 dict 단계에서 끝내고
검증된 dict만 SaveData로 변환한다.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class SaveMeta(BaseModel):
    """세이브 메타데이터"""

    id: str
    name: str
    version: int = Field(..., ge=1)
    created_at: float = Field(..., description="epoch seconds")
    updated_at: float = Field(..., description="epoch seconds")
    play_time: int = Field(0, ge=0, description="누적 플레이 시간 (분)")


class PetRecord(BaseModel):
    """저장된 펫 1마리. 수치는 정수로 검증한다 (null 불가)."""

    instance_id: str
    pet_type: str
    name: str
    hunger: int
    mood: int
    health: int
    max_hunger: int = 100
    max_mood: int = 100
    max_health: int = 100
    level: int = Field(1, ge=1)
    experience: int = Field(0, ge=0)
    status: str = "idle"
    is_at_home: bool = True
    is_dead: bool = False


class GameSection(BaseModel):
    """재화 + 활성 펫 실시간 상태 + 활성 버프"""

    money: int = 0
    game_time: int = 0
    pet: PetRecord
    active_buffs: list[dict[str, Any]] = Field(default_factory=list)


class InventorySection(BaseModel):
    items: list[dict[str, Any]] = Field(default_factory=list)


class OutdoorSection(BaseModel):
    """저장 당시 진행 중이던 외출 세션"""

    playing_pet: Optional[dict[str, Any]] = None
    hunting_pet: Optional[dict[str, Any]] = None
    play_start_time: Optional[float] = None
    hunt_start_time: Optional[float] = None


class SynthesisSection(BaseModel):
    """레시피별 실패 횟수 (키는 레시피 ID 문자열)"""

    fail_counts: dict[str, int] = Field(default_factory=dict)


class CollectionSection(BaseModel):
    owned_pets: list[PetRecord] = Field(default_factory=list)
    active_pet_id: Optional[str] = None


class SaveData(BaseModel):
    """세이브 1건"""

    meta: SaveMeta
    game: GameSection
    backpack: InventorySection
    outdoor: OutdoorSection = Field(default_factory=OutdoorSection)
    synthesis: SynthesisSection = Field(default_factory=SynthesisSection)
    collection: CollectionSection = Field(default_factory=CollectionSection)


class SaveSlotInfo(BaseModel):
    """슬롯 목록 표시용 요약"""

    slot_index: int
    name: str
    version: int
    updated_at: float
    play_time: int = 0

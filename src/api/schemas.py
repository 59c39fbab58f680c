"""API request/response schemas."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


# === Request Schemas ===


class FeedRequest(BaseModel):
    """먹이 요청"""

    item_id: int = Field(..., description="음식 아이템 ID")


class ActivePetRequest(BaseModel):
    """활성 펫 전환 요청"""

    instance_id: str = Field(..., min_length=1)


class UseItemRequest(BaseModel):
    """버프 아이템 사용 요청"""

    item_id: int = Field(..., description="버프 아이템 ID")


class RecallRequest(BaseModel):
    """외출 소환 요청"""

    area: Literal["play", "hunt"]


class SelectRecipeRequest(BaseModel):
    recipe_id: int


class StageFragmentRequest(BaseModel):
    """조각 슬롯 배치 요청"""

    fragment_type: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)


class StagePotionRequest(BaseModel):
    rarity: str = Field(..., description="common, uncommon, rare, epic")


class SaveRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=50, description="세이브 이름")


# === Response Schemas ===


class ActionResponse(BaseModel):
    """액션 결과. 실패 시 message에 사용자 알림 내용."""

    success: bool
    message: Optional[str] = None
    data: dict[str, Any] = {}


class PetInfo(BaseModel):
    """펫 상태"""

    instance_id: str
    pet_type: str
    name: str
    hunger: int
    mood: int
    health: int
    max_hunger: int
    max_mood: int
    max_health: int
    level: int
    experience: int
    status: str
    is_at_home: bool
    is_dead: bool
    level_progress: int = 0
    is_hungry: bool = False
    is_happy: bool = False


class CollectionResponse(BaseModel):
    """보유 펫 목록 + 수집 진행도"""

    owned_pets: list[dict[str, Any]]
    active_pet_id: Optional[str]
    progress: dict[str, int]


class InventoryResponse(BaseModel):
    money: int
    items: list[dict[str, Any]]
    active_buffs: list[dict[str, Any]]
    fragments: dict[str, int]


class OutdoorResponse(BaseModel):
    """외출 세션 상태"""

    is_playing: bool
    is_hunting: bool
    play_elapsed: float = 0.0
    hunt_elapsed: float = 0.0
    last_hunt: Optional[dict[str, Any]] = None


class RecipeInfo(BaseModel):
    """레시피 + 현재 플레이어 기준 정보"""

    recipe_id: int
    name: str
    target_pet_type: str
    fragment_type: str
    fragment_count: int
    potion_rarity: str
    base_success_rate: float
    min_player_level: int
    unlocked: bool
    owned: bool
    fail_count: int


class SynthesisStateResponse(BaseModel):
    selected_recipe_id: Optional[int]
    phase: str
    is_synthesizing: bool
    slots: dict[str, Any]
    can_synthesize: bool
    success_rate: float
    pity_progress: int
    pity_threshold: int
    pity_active: bool
    result: Optional[dict[str, Any]] = None


class NotificationInfo(BaseModel):
    notification_id: int
    level: str
    message: str
    timestamp: float


class SaveSlotResponse(BaseModel):
    """세이브 슬롯 요약. 빈 슬롯은 empty=True."""

    slot_index: int
    empty: bool = False
    name: Optional[str] = None
    version: Optional[int] = None
    updated_at: Optional[float] = None
    play_time: Optional[int] = None

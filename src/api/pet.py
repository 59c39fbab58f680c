"""펫 API — 상태 조회, 먹이, 활성 펫 전환"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from src.api.deps import get_game_service, run_action
from src.api.schemas import (
    ActionResponse,
    ActivePetRequest,
    CollectionResponse,
    FeedRequest,
    PetInfo,
)
from src.services.game_service import PetGameService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pet", tags=["pet"])


@router.get("", response_model=PetInfo)
async def get_pet(game: PetGameService = Depends(get_game_service)) -> PetInfo:
    """활성 펫 상태"""
    state = game.pet_state()
    if state is None:
        raise HTTPException(status_code=404, detail="No active pet")
    return PetInfo(**state)


@router.get("/collection", response_model=CollectionResponse)
async def get_collection(
    game: PetGameService = Depends(get_game_service),
) -> CollectionResponse:
    collection = game.collection
    return CollectionResponse(
        owned_pets=[p.to_dict() for p in collection.owned_pets],
        active_pet_id=collection.active_pet_id,
        progress=collection.collection_progress(),
    )


@router.post("/feed", response_model=ActionResponse)
async def feed_pet(
    request: FeedRequest,
    game: PetGameService = Depends(get_game_service),
) -> ActionResponse:
    """음식 아이템으로 먹이주기. gains는 data에 담긴다."""
    gains: dict = {}

    def _feed():
        result = game.feed_pet(request.item_id)
        if result is not None:
            gains.update(result)
        return result

    return run_action(game, _feed, lambda: dict(gains))


@router.post("/active", response_model=ActionResponse)
async def set_active_pet(
    request: ActivePetRequest,
    game: PetGameService = Depends(get_game_service),
) -> ActionResponse:
    return run_action(
        game,
        lambda: game.set_active_pet(request.instance_id),
        lambda: {"active_pet_id": game.collection.active_pet_id},
    )

"""인벤토리 API — 아이템 목록, 버프 아이템 사용"""

from fastapi import APIRouter, Depends

from src.api.deps import get_game_service, run_action
from src.api.schemas import ActionResponse, InventoryResponse, UseItemRequest
from src.services.game_service import PetGameService

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("", response_model=InventoryResponse)
async def get_inventory(
    game: PetGameService = Depends(get_game_service),
) -> InventoryResponse:
    return InventoryResponse(
        money=game.wallet.money,
        items=game.ledger.to_list(),
        active_buffs=game.buffs.to_list(),
        fragments=game.ledger.fragment_counts(),
    )


@router.post("/use", response_model=ActionResponse)
async def use_item(
    request: UseItemRequest,
    game: PetGameService = Depends(get_game_service),
) -> ActionResponse:
    """버프 아이템 사용 (1개 소비)"""
    return run_action(
        game,
        lambda: game.use_item(request.item_id),
        lambda: {"active_buffs": game.buffs.to_list()},
    )

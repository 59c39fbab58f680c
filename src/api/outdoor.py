"""외출 API — 놀기/사냥 보내기, 소환, 상태 조회"""

from fastapi import APIRouter, Depends

from src.api.deps import get_game_service, run_action
from src.api.schemas import ActionResponse, OutdoorResponse, RecallRequest
from src.core.outdoor import OutdoorArea
from src.services.game_service import PetGameService

router = APIRouter(prefix="/outdoor", tags=["outdoor"])


@router.get("", response_model=OutdoorResponse)
async def get_outdoor(
    game: PetGameService = Depends(get_game_service),
) -> OutdoorResponse:
    outdoor = game.outdoor
    last = outdoor.last_hunt_outcome
    return OutdoorResponse(
        is_playing=outdoor.is_pet_playing,
        is_hunting=outdoor.is_pet_hunting,
        play_elapsed=outdoor.elapsed(OutdoorArea.PLAY),
        hunt_elapsed=outdoor.elapsed(OutdoorArea.HUNT),
        last_hunt=last.to_dict() if last is not None else None,
    )


@router.post("/play", response_model=ActionResponse)
async def send_to_play(
    game: PetGameService = Depends(get_game_service),
) -> ActionResponse:
    return run_action(game, game.send_to_play)


@router.post("/hunt", response_model=ActionResponse)
async def send_to_hunt(
    game: PetGameService = Depends(get_game_service),
) -> ActionResponse:
    return run_action(game, game.send_to_hunt)


@router.post("/recall", response_model=ActionResponse)
async def recall(
    request: RecallRequest,
    game: PetGameService = Depends(get_game_service),
) -> ActionResponse:
    """외출 중단. 보상 없이 집으로."""
    return run_action(game, lambda: game.recall(request.area))

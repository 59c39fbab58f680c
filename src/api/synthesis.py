"""합성 API — 레시피 선택, 슬롯 배치, 합성 실행"""

import logging

from fastapi import APIRouter, Depends

from src.api.deps import get_game_service, run_action
from src.api.schemas import (
    ActionResponse,
    RecipeInfo,
    SelectRecipeRequest,
    StageFragmentRequest,
    StagePotionRequest,
    SynthesisStateResponse,
)
from src.core.synthesis import Recipe, SynthesisEngine
from src.services.game_service import PetGameService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/synthesis", tags=["synthesis"])


def _recipe_info(
    engine: SynthesisEngine, game: PetGameService, recipe: Recipe
) -> RecipeInfo:
    return RecipeInfo(
        recipe_id=recipe.recipe_id,
        name=recipe.name,
        target_pet_type=recipe.target_pet_type,
        fragment_type=recipe.fragment_type,
        fragment_count=recipe.fragment_count,
        potion_rarity=recipe.required_potion.rarity,
        base_success_rate=recipe.base_success_rate,
        min_player_level=recipe.min_player_level,
        unlocked=engine.is_unlocked(recipe),
        owned=game.collection.is_pet_owned(recipe.target_pet_type),
        fail_count=engine.fail_count(recipe.recipe_id),
    )


def _state(engine: SynthesisEngine) -> SynthesisStateResponse:
    progress, threshold = engine.pity_progress()
    return SynthesisStateResponse(
        selected_recipe_id=engine.selected_recipe_id,
        phase=engine.phase.value,
        is_synthesizing=engine.is_synthesizing,
        slots=engine.slots.to_dict(),
        can_synthesize=engine.can_synthesize,
        success_rate=engine.current_success_rate(),
        pity_progress=progress,
        pity_threshold=threshold,
        pity_active=engine.is_pity_active(),
        result=engine.result.to_dict() if engine.result is not None else None,
    )


@router.get("/recipes", response_model=list[RecipeInfo])
async def list_recipes(
    game: PetGameService = Depends(get_game_service),
) -> list[RecipeInfo]:
    engine = game.synthesis
    return [
        _recipe_info(engine, game, recipe)
        for recipe in game.catalogs.get_all_recipes()
    ]


@router.get("", response_model=SynthesisStateResponse)
async def get_synthesis(
    game: PetGameService = Depends(get_game_service),
) -> SynthesisStateResponse:
    return _state(game.synthesis)


@router.post("/select", response_model=ActionResponse)
async def select_recipe(
    request: SelectRecipeRequest,
    game: PetGameService = Depends(get_game_service),
) -> ActionResponse:
    engine = game.synthesis
    return run_action(
        game,
        lambda: engine.select_recipe(request.recipe_id),
        lambda: _state(engine).model_dump(),
    )


@router.post("/slots/fragment", response_model=ActionResponse)
async def add_fragment(
    request: StageFragmentRequest,
    game: PetGameService = Depends(get_game_service),
) -> ActionResponse:
    engine = game.synthesis
    return run_action(
        game,
        lambda: engine.add_fragment_to_slot(request.fragment_type, request.quantity),
        lambda: _state(engine).model_dump(),
    )


@router.delete("/slots/fragment/{index}", response_model=ActionResponse)
async def remove_fragment(
    index: int,
    game: PetGameService = Depends(get_game_service),
) -> ActionResponse:
    engine = game.synthesis
    return run_action(
        game,
        lambda: engine.remove_fragment_from_slot(index),
        lambda: _state(engine).model_dump(),
    )


@router.post("/slots/potion", response_model=ActionResponse)
async def set_potion(
    request: StagePotionRequest,
    game: PetGameService = Depends(get_game_service),
) -> ActionResponse:
    engine = game.synthesis
    return run_action(
        game,
        lambda: engine.set_potion_slot(request.rarity),
        lambda: _state(engine).model_dump(),
    )


@router.delete("/slots/potion", response_model=ActionResponse)
async def remove_potion(
    game: PetGameService = Depends(get_game_service),
) -> ActionResponse:
    engine = game.synthesis
    return run_action(
        game,
        engine.remove_potion_from_slot,
        lambda: _state(engine).model_dump(),
    )


@router.post("/slots/auto", response_model=ActionResponse)
async def auto_fill(
    game: PetGameService = Depends(get_game_service),
) -> ActionResponse:
    """보유 재료로 슬롯 자동 배치"""
    engine = game.synthesis
    return run_action(
        game,
        engine.auto_fill_slots,
        lambda: _state(engine).model_dump(),
    )


@router.post("/start", response_model=ActionResponse)
async def start_synthesis(
    game: PetGameService = Depends(get_game_service),
) -> ActionResponse:
    """합성 연출 시작. 결과는 연출이 끝난 뒤 GET /synthesis 에서 확인."""
    engine = game.synthesis
    return run_action(
        game,
        engine.start_synthesis,
        lambda: _state(engine).model_dump(),
    )


@router.post("/close", response_model=ActionResponse)
async def close_result(
    game: PetGameService = Depends(get_game_service),
) -> ActionResponse:
    engine = game.synthesis
    return run_action(game, engine.close_result)


@router.post("/reset", response_model=ActionResponse)
async def reset_synthesis(
    game: PetGameService = Depends(get_game_service),
) -> ActionResponse:
    """진행 중인 합성 취소. 재료는 소비되지 않는다."""
    engine = game.synthesis

    def _reset() -> bool:
        engine.reset_synthesis()
        return True

    return run_action(game, _reset, lambda: _state(engine).model_dump())

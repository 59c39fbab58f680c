"""세이브 API — 슬롯 목록, 저장, 불러오기, 삭제, 내보내기/가져오기"""

import logging
from typing import Any, NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from src.api.deps import get_save_service
from src.api.schemas import SaveRequest, SaveSlotResponse
from src.core.errors import (
    InvalidSlotError,
    SaveDataError,
    SaveInProgressError,
    SaveNotFoundError,
)
from src.core.save import SaveSlotInfo
from src.services.save_service import SaveService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/saves", tags=["saves"])


def _to_response(
    slot_index: int, info: Optional[SaveSlotInfo]
) -> SaveSlotResponse:
    if info is None:
        return SaveSlotResponse(slot_index=slot_index, empty=True)
    return SaveSlotResponse(**info.model_dump())


def _raise_http(e: Exception) -> NoReturn:
    """세이브 예외 → HTTP 상태 코드"""
    if isinstance(e, InvalidSlotError):
        raise HTTPException(status_code=400, detail=str(e)) from e
    if isinstance(e, SaveNotFoundError):
        raise HTTPException(status_code=404, detail=str(e)) from e
    if isinstance(e, SaveInProgressError):
        raise HTTPException(status_code=409, detail=str(e)) from e
    if isinstance(e, SaveDataError):
        raise HTTPException(status_code=422, detail=str(e)) from e
    if isinstance(e, SQLAlchemyError):
        logger.error("Save storage error: %s", e)
        raise HTTPException(status_code=500, detail="Save storage error") from e
    raise e


@router.get("", response_model=list[SaveSlotResponse])
async def list_slots(
    saves: SaveService = Depends(get_save_service),
) -> list[SaveSlotResponse]:
    return [_to_response(i, info) for i, info in enumerate(saves.list_slots())]


@router.post("/auto")
async def auto_save(saves: SaveService = Depends(get_save_service)) -> dict[str, bool]:
    return {"saved": saves.auto_save()}


@router.post("/{slot_index}", response_model=SaveSlotResponse)
async def save_to_slot(
    slot_index: int,
    request: Optional[SaveRequest] = None,
    saves: SaveService = Depends(get_save_service),
) -> SaveSlotResponse:
    """현재 게임을 수동 슬롯에 저장"""
    name = request.name if request is not None else None
    try:
        info = saves.save_to_slot(slot_index, name)
    except (
        InvalidSlotError, SaveInProgressError, SaveDataError, SQLAlchemyError
    ) as e:
        _raise_http(e)
    return _to_response(slot_index, info)


@router.post("/{slot_index}/load", response_model=SaveSlotResponse)
async def load_from_slot(
    slot_index: int,
    saves: SaveService = Depends(get_save_service),
) -> SaveSlotResponse:
    """슬롯 불러오기. 자동 저장 슬롯은 -1."""
    try:
        save = saves.load_from_slot(slot_index)
    except (InvalidSlotError, SaveNotFoundError, SaveDataError) as e:
        _raise_http(e)
    return SaveSlotResponse(
        slot_index=slot_index,
        name=save.meta.name,
        version=save.meta.version,
        updated_at=save.meta.updated_at,
        play_time=save.meta.play_time,
    )


@router.delete("/{slot_index}")
async def delete_slot(
    slot_index: int,
    saves: SaveService = Depends(get_save_service),
) -> dict[str, bool]:
    try:
        deleted = saves.delete_slot(slot_index)
    except (InvalidSlotError, SQLAlchemyError) as e:
        _raise_http(e)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Save slot {slot_index} is empty")
    return {"deleted": True}


@router.get("/{slot_index}/export")
async def export_save(
    slot_index: int,
    saves: SaveService = Depends(get_save_service),
) -> dict[str, Any]:
    try:
        return saves.export_save(slot_index)
    except (InvalidSlotError, SaveNotFoundError) as e:
        _raise_http(e)


@router.post("/{slot_index}/import", response_model=SaveSlotResponse)
async def import_save(
    slot_index: int,
    payload: dict[str, Any] = Body(...),
    saves: SaveService = Depends(get_save_service),
) -> SaveSlotResponse:
    """외부 세이브 문서를 검증 후 슬롯에 기록"""
    try:
        info = saves.import_save(payload, slot_index)
    except (InvalidSlotError, SaveDataError, SQLAlchemyError) as e:
        _raise_http(e)
    return _to_response(slot_index, info)

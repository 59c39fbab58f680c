"""세이브 버전 관리 — 검증 + 순차 마이그레이션

버전 이력:
- v1: 단일 펫 세이브 (game.pet만 존재)
- v2: 컬렉션/합성 섹션 추가
"""

from __future__ import annotations

import copy
import logging
import uuid
from typing import Any, Callable

from src.core.errors import SaveDataError, UnsupportedSaveVersionError

logger = logging.getLogger(__name__)

CURRENT_SAVE_VERSION = 2

REQUIRED_PET_FIELDS = ("name", "hunger", "mood", "health", "status")

Migration = Callable[[dict[str, Any]], dict[str, Any]]


def _migrate_v1_to_v2(data: dict[str, Any]) -> dict[str, Any]:
    """단일 펫 → 컬렉션. game.pet을 유일한 보유 펫이자 활성 펫으로 옮긴다."""
    pet = dict(data["game"]["pet"])
    pet.setdefault("instance_id", f"pet_{uuid.uuid4().hex[:12]}")
    pet.setdefault("pet_type", "cat")
    data["game"]["pet"] = pet

    data.setdefault(
        "collection", {"owned_pets": [dict(pet)], "active_pet_id": pet["instance_id"]}
    )
    data.setdefault("synthesis", {"fail_counts": {}})
    data["meta"]["version"] = 2
    return data


# 키 = 도달하는 버전. 해당 키가 없으면 버전 번호만 올린다.
MIGRATIONS: dict[int, Migration] = {
    2: _migrate_v1_to_v2,
}


def validate_save_data(data: Any) -> None:
    """필수 구조 검증. 실패 시 SaveDataError."""
    if not isinstance(data, dict):
        raise SaveDataError("Save data is not an object")

    if not isinstance(data.get("meta"), dict):
        raise SaveDataError("Save data is missing meta")

    game = data.get("game")
    if not isinstance(game, dict):
        raise SaveDataError("Save data is missing game")

    pet = game.get("pet")
    if not isinstance(pet, dict):
        raise SaveDataError("Save data is missing game.pet")

    for name in REQUIRED_PET_FIELDS:
        if name not in pet:
            raise SaveDataError(f"Save data pet is missing {name}")

    backpack = data.get("backpack")
    if not isinstance(backpack, dict) or not isinstance(backpack.get("items"), list):
        raise SaveDataError("Save data is missing backpack.items")


def save_version_of(data: dict[str, Any]) -> int:
    try:
        return int(data.get("meta", {}).get("version") or 1)
    except (TypeError, ValueError) as e:
        raise SaveDataError(f"Invalid save version: {e}") from e


def migrate_save_if_needed(data: dict[str, Any]) -> dict[str, Any]:
    """저장 버전 → 현재 버전까지 순서대로 마이그레이션.

    현재보다 높은 버전이면 UnsupportedSaveVersionError.
    입력 dict는 변경하지 않는다.
    """
    version = save_version_of(data)
    if version > CURRENT_SAVE_VERSION:
        raise UnsupportedSaveVersionError(version, CURRENT_SAVE_VERSION)
    if version == CURRENT_SAVE_VERSION:
        return data

    migrated = copy.deepcopy(data)
    migrated.setdefault("meta", {})
    for v in range(version, CURRENT_SAVE_VERSION):
        step = MIGRATIONS.get(v + 1)
        if step is None:
            migrated["meta"]["version"] = v + 1
            continue
        logger.info("Migrating save: v%d → v%d", v, v + 1)
        try:
            migrated = step(migrated)
        except (KeyError, TypeError) as e:
            raise SaveDataError(f"Migration to v{v + 1} failed: {e}") from e
        migrated["meta"]["version"] = v + 1

    logger.info("Save migrated: v%d → v%d", version, CURRENT_SAVE_VERSION)
    return migrated

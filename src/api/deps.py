"""API 공용 의존성"""

from typing import Any, Callable

from fastapi import Request

from src.api.schemas import ActionResponse
from src.services.game_service import PetGameService
from src.services.save_service import SaveService


def get_game_service(request: Request) -> PetGameService:
    """PetGameService 인스턴스 반환 (의존성 주입)"""
    service: PetGameService = request.app.state.game_service
    return service


def get_save_service(request: Request) -> SaveService:
    """SaveService 인스턴스 반환 (의존성 주입)"""
    service: SaveService = request.app.state.save_service
    return service


def run_action(
    game: PetGameService,
    action: Callable[[], Any],
    data: Callable[[], dict[str, Any]] | None = None,
) -> ActionResponse:
    """액션 실행 후 이번 액션이 남긴 최신 알림을 message로 붙인다.

    action이 None/False를 반환하면 실패로 본다.
    """
    before = game.notifications.latest()
    before_id = before.notification_id if before is not None else 0

    outcome = action()

    after = game.notifications.latest()
    message = None
    if after is not None and after.notification_id != before_id:
        message = after.message

    success = outcome is not None and outcome is not False
    return ActionResponse(
        success=success,
        message=message,
        data=data() if (success and data is not None) else {},
    )

"""알림 API"""

from fastapi import APIRouter, Depends

from src.api.deps import get_game_service
from src.api.schemas import NotificationInfo
from src.core.notification import Notification
from src.services.game_service import PetGameService

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _to_info(n: Notification) -> NotificationInfo:
    return NotificationInfo(
        notification_id=n.notification_id,
        level=n.level.value,
        message=n.message,
        timestamp=n.timestamp,
    )


@router.get("", response_model=list[NotificationInfo])
async def list_notifications(
    game: PetGameService = Depends(get_game_service),
) -> list[NotificationInfo]:
    """보관 중인 알림 (비우지 않음)"""
    return [_to_info(n) for n in game.notifications.pending]


@router.post("/drain", response_model=list[NotificationInfo])
async def drain_notifications(
    game: PetGameService = Depends(get_game_service),
) -> list[NotificationInfo]:
    """알림을 반환하고 비운다"""
    return [_to_info(n) for n in game.notifications.drain()]

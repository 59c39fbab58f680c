"""사용자 알림 수집기

코어는 레벨이 붙은 메시지를 남기기만 한다.
표시/자동 소멸 타이밍은 화면 쪽 책임.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

MAX_NOTIFICATIONS = 3  # 동시에 보관하는 최대 알림 수


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    notification_id: int
    level: NotificationLevel
    message: str
    timestamp: float


class NotificationCenter:
    """최근 알림 N개를 보관. 넘치면 가장 오래된 것부터 버린다."""

    def __init__(self, max_notifications: int = MAX_NOTIFICATIONS, clock=None) -> None:
        self._items: deque[Notification] = deque(maxlen=max_notifications)
        self._next_id = 1
        self._clock = clock

    def notify(self, level: NotificationLevel, message: str) -> Notification:
        timestamp = self._clock() if self._clock is not None else 0.0
        notification = Notification(
            notification_id=self._next_id,
            level=level,
            message=message,
            timestamp=timestamp,
        )
        self._next_id += 1
        self._items.append(notification)
        logger.debug("Notification [%s] %s", level.value, message)
        return notification

    def success(self, message: str) -> Notification:
        return self.notify(NotificationLevel.SUCCESS, message)

    def warning(self, message: str) -> Notification:
        return self.notify(NotificationLevel.WARNING, message)

    def error(self, message: str) -> Notification:
        return self.notify(NotificationLevel.ERROR, message)

    def info(self, message: str) -> Notification:
        return self.notify(NotificationLevel.INFO, message)

    @property
    def pending(self) -> list[Notification]:
        return list(self._items)

    def latest(self) -> Optional[Notification]:
        return self._items[-1] if self._items else None

    def drain(self) -> list[Notification]:
        """보관 중인 알림을 반환하고 비운다."""
        items = list(self._items)
        self._items.clear()
        return items

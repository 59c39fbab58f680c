"""EventBus - 코어 컴포넌트 → 서비스 방향 이벤트 통신

규칙:
- 코어 컴포넌트는 서로의 결과를 직접 구독하지 않고 EventBus로 알린다
- 이벤트 데이터는 식별자와 수치만 담는다
- 전파 깊이 최대 MAX_DEPTH 단계
- 모든 핸들러는 발행한 콜백과 같은 턴 안에서 동기 실행된다
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from src.core.logging import get_logger

logger = get_logger(__name__)

MAX_DEPTH = 5  # 핸들러 안에서 재발행되는 이벤트 전파 최대 깊이


@dataclass
class GameEvent:
    """이벤트 데이터 컨테이너

    Args:
        event_type: 이벤트 유형 (예: "pet_synthesized", "hunt_finished")
        data: 이벤트 데이터 (ID/수치 위주)
        source: 발행한 컴포넌트 이름
    """

    event_type: str
    data: Dict[str, Any]
    source: str

    # 내부 추적용 (외부에서 설정하지 않음)
    _depth: int = field(default=0, repr=False)


# 핸들러 타입: GameEvent를 받는 callable
EventHandler = Callable[[GameEvent], None]


class EventBus:
    """동기식 이벤트 버스

    사용 패턴:
        bus = EventBus()
        bus.subscribe(EventTypes.PET_DIED, on_pet_died)
        bus.emit(GameEvent(EventTypes.PET_DIED, {"instance_id": "pet_1"}, "outdoor"))
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._current_depth: int = 0

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """이벤트 구독 등록"""
        self._handlers[event_type].append(handler)
        logger.debug(f"EventBus 구독: {event_type} → {handler.__qualname__}")

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        """이벤트 구독 해제"""
        if event_type in self._handlers:
            try:
                self._handlers[event_type].remove(handler)
                logger.debug(
                    f"EventBus 구독 해제: {event_type} → {handler.__qualname__}"
                )
            except ValueError:
                logger.warning(f"핸들러 미등록: {event_type} → {handler.__qualname__}")

    def emit(self, event: GameEvent) -> None:
        """이벤트 발행. 등록된 핸들러를 등록 순서대로 동기 호출.

        전파 깊이 MAX_DEPTH 초과 시 무시한다.
        핸들러 예외는 로그만 남기고 다음 핸들러로 진행한다.
        """
        if self._current_depth >= MAX_DEPTH:
            logger.warning(
                f"EventBus 전파 깊이 초과 ({MAX_DEPTH}): "
                f"{event.source}:{event.event_type} 무시됨"
            )
            return

        event._depth = self._current_depth

        handlers = list(self._handlers.get(event.event_type, []))
        if not handlers:
            logger.debug(f"EventBus: {event.event_type} 구독자 없음")
            return

        logger.debug(
            f"EventBus 전파: {event.event_type} (source={event.source}, "
            f"depth={self._current_depth}, handlers={len(handlers)})"
        )

        self._current_depth += 1
        try:
            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        f"EventBus 핸들러 에러: {handler.__qualname__} "
                        f"(event={event.event_type})"
                    )
        finally:
            self._current_depth -= 1

    def clear(self) -> None:
        """모든 구독 해제 (테스트용)"""
        self._handlers.clear()
        self._current_depth = 0

    @property
    def handler_count(self) -> int:
        """등록된 총 핸들러 수"""
        return sum(len(h) for h in self._handlers.values())

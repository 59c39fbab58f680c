"""지연 콜백 스케줄러 — 합성 단계 진행/외출 세션 완료에 사용

단일 스레드 협력 모델:
- 모든 콜백은 한 논리 스레드에서 실행된다
- 세션/합성 한 건의 타이머는 TimerGroup 하나로 묶어 함께 취소한다
- ManualScheduler는 테스트용 가상 시계 (advance로 시간 진행)
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
import time
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class TimerHandle(Protocol):
    def cancel(self) -> None: ...

    @property
    def cancelled(self) -> bool: ...


class Scheduler(Protocol):
    """지연 실행 + 현재 시각 제공"""

    def now(self) -> float:
        """현재 시각 (초)"""
        ...

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        """delay초 후 callback 실행. 반환된 핸들로 취소 가능."""
        ...


class TimerGroup:
    """한 작업 단위(세션/합성 1회)에 속한 타이머 묶음. 취소 토큰 역할."""

    def __init__(self, scheduler: Scheduler, name: str = "") -> None:
        self._scheduler = scheduler
        self._handles: list[TimerHandle] = []
        self._cancelled = False
        self.name = name

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def call_later(self, delay: float, callback: Callback) -> Optional[TimerHandle]:
        """그룹 소속 타이머 등록. 이미 취소된 그룹이면 등록하지 않는다."""
        if self._cancelled:
            logger.debug("TimerGroup %s already cancelled, skip schedule", self.name)
            return None

        def _guarded() -> None:
            # 취소와 발화가 같은 턴에 겹쳐도 취소가 우선
            if not self._cancelled:
                callback()

        handle = self._scheduler.call_later(delay, _guarded)
        self._handles.append(handle)
        return handle

    def cancel(self) -> None:
        """그룹 내 모든 타이머를 한 번에 취소"""
        self._cancelled = True
        for handle in self._handles:
            handle.cancel()
        self._handles.clear()
        logger.debug("TimerGroup %s cancelled", self.name)

    @property
    def pending_count(self) -> int:
        return sum(1 for h in self._handles if not h.cancelled)


# === 테스트/시뮬레이션용 가상 시계 ===


class _ManualHandle:
    def __init__(self, when: float, seq: int, callback: Callback) -> None:
        self.when = when
        self.seq = seq
        self.callback = callback
        self._cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def __lt__(self, other: "_ManualHandle") -> bool:
        return (self.when, self.seq) < (other.when, other.seq)


class ManualScheduler:
    """가상 시계 스케줄러.

    advance(seconds) 호출 시 만기된 콜백을 (시각, 등록순) 순서로 실행한다.
    콜백 안에서 새로 등록한 타이머도 같은 advance 구간 안이면 실행된다.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[_ManualHandle] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callback) -> _ManualHandle:
        handle = _ManualHandle(self._now + max(0.0, delay), next(self._seq), callback)
        heapq.heappush(self._queue, handle)
        return handle

    def advance(self, seconds: float) -> int:
        """시간 진행. 반환: 실행된 콜백 수."""
        target = self._now + seconds
        fired = 0
        while self._queue and self._queue[0].when <= target:
            handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = handle.when
            handle.fired = True
            handle.callback()
            fired += 1
        self._now = target
        return fired

    def run_all(self, limit: int = 10_000) -> int:
        """대기 중인 타이머를 모두 실행 (시간도 그만큼 진행)."""
        fired = 0
        while self._queue and fired < limit:
            handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = max(self._now, handle.when)
            handle.fired = True
            handle.callback()
            fired += 1
        return fired

    @property
    def pending_count(self) -> int:
        return sum(1 for h in self._queue if not h.cancelled)


# === 실서비스용 ===


class _AsyncioHandle:
    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler:
    """asyncio 이벤트 루프 위의 스케줄러. 루프 스레드에서만 호출한다."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return time.time()

    def call_later(self, delay: float, callback: Callback) -> _AsyncioHandle:
        return _AsyncioHandle(self._get_loop().call_later(delay, callback))

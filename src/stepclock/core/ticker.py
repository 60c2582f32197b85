"""与事件循环解耦的周期触发器，驱动久坐检测。"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class Ticker(Protocol):
    """周期时钟接口。"""

    def start(self, callback: Callable[[], None]) -> None:
        """开始按固定间隔调用 callback。"""

    def stop(self) -> None:
        """停止触发，可重复调用。"""


class PeriodicTicker:
    """后台线程按固定间隔触发回调，与其他数据流无关。"""

    def __init__(self, interval: float, name: str = "stepclock-ticker") -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._interval = interval
        self._name = name
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._thread is not None

    def start(self, callback: Callable[[], None]) -> None:
        if self._thread is not None:
            return

        stop_event = threading.Event()

        def _run() -> None:
            while not stop_event.wait(self._interval):
                try:
                    callback()
                except Exception:
                    logger.warning("周期回调执行失败", exc_info=True)

        self._stop_event = stop_event
        self._thread = threading.Thread(target=_run, name=self._name, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()
            self._stop_event = None
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=1.0)

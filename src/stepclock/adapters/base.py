"""传感器数据源基类：运动（加速度/陀螺仪）与计步。"""

from __future__ import annotations

import abc
import datetime as dt
import threading
from typing import Callable, Dict, List, Optional

from stepclock.core.snapshot import Vector3


VectorHandler = Callable[[Vector3], None]
StepHandler = Callable[[int, Optional[float], dt.datetime], None]


class SensorUnavailableError(RuntimeError):
    """传感器无法启动（缺少硬件或权限）。"""


class SensorSource(abc.ABC):
    """推送式数据源的公共部分：按数据流登记回调，仅在运行期间投递。"""

    streams: tuple[str, ...] = ()

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Callable[..., None]]] = {name: [] for name in self.streams}
        self._handlers_lock = threading.Lock()
        self._running = threading.Event()

    @property
    def running(self) -> bool:
        return self._running.is_set()

    def add_handler(self, stream: str, handler: Callable[..., None]) -> None:
        with self._handlers_lock:
            handlers = self._handlers[stream]
            if handler not in handlers:
                handlers.append(handler)

    def remove_handler(self, stream: str, handler: Callable[..., None]) -> None:
        with self._handlers_lock:
            handlers = self._handlers[stream]
            if handler in handlers:
                handlers.remove(handler)

    def stop(self) -> None:
        """停止投递，可重复调用。"""

        if not self._running.is_set():
            return
        self._running.clear()
        self._on_stop()

    def _emit(self, stream: str, *args) -> None:
        if not self._running.is_set():
            return
        with self._handlers_lock:
            handlers = list(self._handlers[stream])
        for handler in handlers:
            handler(*args)

    def _mark_started(self) -> None:
        self._running.set()

    @abc.abstractmethod
    def _on_stop(self) -> None:
        """释放采集资源。"""


class MotionSource(SensorSource):
    """加速度计与陀螺仪数据源，两路数据独立计时。"""

    streams = ("acceleration", "rotation")

    def start(self, accel_rate_hz: float = 50.0, gyro_rate_hz: float = 50.0) -> None:
        """启动采集；硬件不可用时抛出 SensorUnavailableError。"""

        if self.running:
            return
        self._on_start(accel_rate_hz, gyro_rate_hz)
        self._mark_started()

    @abc.abstractmethod
    def _on_start(self, accel_rate_hz: float, gyro_rate_hz: float) -> None:
        """子类启动具体采集逻辑。"""

    def add_acceleration_handler(self, handler: VectorHandler) -> None:
        self.add_handler("acceleration", handler)

    def remove_acceleration_handler(self, handler: VectorHandler) -> None:
        self.remove_handler("acceleration", handler)

    def add_rotation_handler(self, handler: VectorHandler) -> None:
        self.add_handler("rotation", handler)

    def remove_rotation_handler(self, handler: VectorHandler) -> None:
        self.remove_handler("rotation", handler)

    def _emit_acceleration(self, vector: Vector3) -> None:
        self._emit("acceleration", vector)

    def _emit_rotation(self, vector: Vector3) -> None:
        self._emit("rotation", vector)


class StepSource(SensorSource):
    """计步器数据源，推送 (累计步数, 距离, 采样结束时间)。"""

    streams = ("steps",)

    def start(self, from_time: Optional[dt.datetime] = None) -> None:
        """从 from_time 开始累计；硬件不可用时抛出 SensorUnavailableError。"""

        if self.running:
            return
        self._on_start(from_time or dt.datetime.now(dt.timezone.utc))
        self._mark_started()

    @abc.abstractmethod
    def _on_start(self, from_time: dt.datetime) -> None:
        """子类启动具体采集逻辑。"""

    def add_step_handler(self, handler: StepHandler) -> None:
        self.add_handler("steps", handler)

    def remove_step_handler(self, handler: StepHandler) -> None:
        self.remove_handler("steps", handler)

    def _emit_steps(self, steps: int, distance_meters: Optional[float], end_time: dt.datetime) -> None:
        self._emit("steps", steps, distance_meters, end_time)

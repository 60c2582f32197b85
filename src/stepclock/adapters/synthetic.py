"""手动推送的传感器与时钟，用于测试与离线回放。"""

from __future__ import annotations

import datetime as dt
from typing import Callable, Optional

from stepclock.adapters.base import MotionSource, SensorUnavailableError, StepSource
from stepclock.core.snapshot import Vector3


class SyntheticMotionSource(MotionSource):
    """由调用方推送样本；未启动时推送的样本会被丢弃。"""

    def __init__(self, available: bool = True) -> None:
        super().__init__()
        self._available = available
        self.start_count = 0
        self.stop_count = 0
        self.rates: Optional[tuple[float, float]] = None

    def _on_start(self, accel_rate_hz: float, gyro_rate_hz: float) -> None:
        if not self._available:
            raise SensorUnavailableError("motion sensor unavailable")
        self.start_count += 1
        self.rates = (accel_rate_hz, gyro_rate_hz)

    def _on_stop(self) -> None:
        self.stop_count += 1

    def push_acceleration(self, x: float, y: float, z: float) -> None:
        self._emit_acceleration(Vector3(x, y, z))

    def push_rotation(self, x: float, y: float, z: float) -> None:
        self._emit_rotation(Vector3(x, y, z))


class SyntheticStepSource(StepSource):
    """由调用方推送累计步数。"""

    def __init__(self, available: bool = True) -> None:
        super().__init__()
        self._available = available
        self.start_count = 0
        self.stop_count = 0
        self.started_from: Optional[dt.datetime] = None

    def _on_start(self, from_time: dt.datetime) -> None:
        if not self._available:
            raise SensorUnavailableError("step counting unavailable")
        self.start_count += 1
        self.started_from = from_time

    def _on_stop(self) -> None:
        self.stop_count += 1

    def push_steps(
        self,
        steps: int,
        distance_meters: Optional[float] = None,
        end_time: Optional[dt.datetime] = None,
    ) -> None:
        self._emit_steps(steps, distance_meters, end_time or dt.datetime.now(dt.timezone.utc))


class ManualTicker:
    """手动触发的时钟，fire() 只在启动后生效。"""

    def __init__(self) -> None:
        self._callback: Optional[Callable[[], None]] = None

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, callback: Callable[[], None]) -> None:
        if self._callback is None:
            self._callback = callback

    def stop(self) -> None:
        self._callback = None

    def fire(self) -> None:
        if self._callback is not None:
            self._callback()

"""模拟传感器，用于无硬件的开发环境。"""

from __future__ import annotations

import datetime as dt
import logging
import math
import random
import threading
from typing import List, Optional

from stepclock.adapters.base import MotionSource, StepSource
from stepclock.core.snapshot import Vector3

logger = logging.getLogger(__name__)


def _spawn(name: str, interval: float, stop_event: threading.Event, tick) -> threading.Thread:
    def _loop() -> None:
        while not stop_event.wait(interval):
            tick()

    thread = threading.Thread(target=_loop, name=name, daemon=True)
    thread.start()
    return thread


def _join_all(threads: List[threading.Thread]) -> None:
    current = threading.current_thread()
    for thread in threads:
        if thread is not current:
            thread.join(timeout=1.0)


class SimulatedMotionSource(MotionSource):
    """生成步行节奏的加速度（含重力）与角速度，两路各自独立线程。"""

    def __init__(self, cadence_hz: float = 1.8, walking_ratio: float = 0.7) -> None:
        super().__init__()
        self._cadence_hz = cadence_hz
        self._walking_ratio = walking_ratio
        self._stop_event = threading.Event()
        self._threads: List[threading.Thread] = []
        self._phase = 0.0
        self._accel_dt = 0.02
        self._walking = True
        # 加速度与陀螺仪线程共享步行状态
        self._state_lock = threading.Lock()

    def _on_start(self, accel_rate_hz: float, gyro_rate_hz: float) -> None:
        self._accel_dt = 1.0 / accel_rate_hz
        self._stop_event = threading.Event()
        self._threads = [
            _spawn("stepclock-accel", 1.0 / accel_rate_hz, self._stop_event, self._sample_acceleration),
            _spawn("stepclock-gyro", 1.0 / gyro_rate_hz, self._stop_event, self._sample_rotation),
        ]
        logger.info("模拟运动传感器已启动: accel=%.0fHz gyro=%.0fHz", accel_rate_hz, gyro_rate_hz)

    def _on_stop(self) -> None:
        self._stop_event.set()
        _join_all(self._threads)
        self._threads = []
        logger.info("模拟运动传感器已停止")

    def _sample_acceleration(self) -> None:
        # 平均约 50 秒切换一次步行/静止
        with self._state_lock:
            if random.random() < 0.02 * self._accel_dt:
                self._walking = random.random() < self._walking_ratio
            self._phase += 2 * math.pi * self._cadence_hz * self._accel_dt
            swing = 0.25 * math.sin(self._phase) if self._walking else 0.0
        self._emit_acceleration(
            Vector3(
                x=random.gauss(0.0, 0.01) + swing * 0.3,
                y=random.gauss(0.0, 0.01) + swing,
                z=-1.0 + random.gauss(0.0, 0.01),
            )
        )

    def _sample_rotation(self) -> None:
        with self._state_lock:
            walking = self._walking
        if walking:
            vector = Vector3(
                x=random.gauss(0.0, 0.3),
                y=random.gauss(0.0, 0.3),
                z=random.gauss(0.0, 0.15),
            )
        else:
            vector = Vector3()
        self._emit_rotation(vector)


class SimulatedStepSource(StepSource):
    """按固定间隔累加步数，可选提供原生距离。"""

    def __init__(
        self,
        update_interval: float = 1.0,
        cadence_steps_per_second: float = 1.8,
        stride_meters: Optional[float] = 0.74,
    ) -> None:
        super().__init__()
        self._update_interval = update_interval
        self._cadence = cadence_steps_per_second
        self._stride_meters = stride_meters
        self._stop_event = threading.Event()
        self._threads: List[threading.Thread] = []
        self._steps = 0.0

    def _on_start(self, from_time: dt.datetime) -> None:
        self._steps = 0.0
        self._stop_event = threading.Event()
        self._threads = [_spawn("stepclock-pedometer", self._update_interval, self._stop_event, self._sample)]
        logger.info("模拟计步器已启动，起始时间 %s", from_time.isoformat())

    def _on_stop(self) -> None:
        self._stop_event.set()
        _join_all(self._threads)
        self._threads = []
        logger.info("模拟计步器已停止")

    def _sample(self) -> None:
        self._steps += max(0.0, random.gauss(self._cadence, 0.3)) * self._update_interval
        steps = int(self._steps)
        distance = steps * self._stride_meters if self._stride_meters is not None else None
        self._emit_steps(steps, distance, dt.datetime.now(dt.timezone.utc))

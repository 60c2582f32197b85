"""后台服务：根据配置装配数据源、通知器与聚合器，并向 HTTP 层提供命令接口。"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from stepclock.adapters import MotionSource, SimulatedMotionSource, SimulatedStepSource, StepSource
from stepclock.config import AppConfig
from stepclock.config_store import UserSettings, resolve_config, save_user_settings
from stepclock.core.activity_engine import ActivityAggregator
from stepclock.core.display import distance_display, distance_progress, step_progress
from stepclock.core.snapshot import ActivitySnapshot
from stepclock.core.ticker import Ticker
from stepclock.notifiers import LoggingNotifier, Notifier, NullNotifier

logger = logging.getLogger(__name__)


def build_sources(config: AppConfig) -> Tuple[Optional[MotionSource], Optional[StepSource]]:
    backend = config.sensor_backend
    if backend == "simulated":
        return SimulatedMotionSource(), SimulatedStepSource()
    if backend == "none":
        return None, None
    raise ValueError(f"未知的传感器后端: {backend}")


def build_notifier(config: AppConfig) -> Notifier:
    backend = config.notifier_backend
    if backend == "macos":
        from stepclock.notifiers.macos import MacOSNotifier

        return MacOSNotifier()
    if backend == "log":
        return LoggingNotifier()
    if backend == "none":
        return NullNotifier()
    raise ValueError(f"未知的通知后端: {backend}")


class ActivityService:
    """持有聚合器并记录最近一次快照更新时间。"""

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        motion_source: Optional[MotionSource] = None,
        step_source: Optional[StepSource] = None,
        clock: Optional[Ticker] = None,
        notifier: Optional[Notifier] = None,
        settings_path: Optional[Path] = None,
    ) -> None:
        config = config or AppConfig.load()
        self._settings_path = settings_path
        config, self._settings = resolve_config(config, settings_path)

        if motion_source is None and step_source is None:
            motion_source, step_source = build_sources(config)

        self._config = config
        self._lock = threading.Lock()
        self._updated_at: Optional[float] = None
        self.aggregator = ActivityAggregator(
            motion_source=motion_source,
            step_source=step_source,
            clock=clock,
            notifier=notifier or build_notifier(config),
            config=config,
        )
        self.aggregator.subscribe(self._on_snapshot)

    def _on_snapshot(self, snapshot: ActivitySnapshot) -> None:
        with self._lock:
            self._updated_at = time.time()

    @property
    def config(self) -> AppConfig:
        return self._config

    def start(self) -> ActivitySnapshot:
        self.aggregator.start()
        return self.aggregator.current_snapshot()

    def stop(self) -> ActivitySnapshot:
        self.aggregator.stop()
        return self.aggregator.current_snapshot()

    def toggle(self) -> ActivitySnapshot:
        return self.aggregator.toggle()

    def snapshot_payload(self) -> Dict[str, Any]:
        """快照加上展示层需要的派生字段。"""

        snapshot = self.aggregator.current_snapshot()
        config = self._config
        with self._lock:
            updated_at = self._updated_at
        return {
            "snapshot": snapshot.to_dict(),
            "distance_display": distance_display(
                snapshot.distance_meters, snapshot.steps, config.stride_length_meters
            ),
            "step_goal": config.step_goal,
            "step_progress": step_progress(snapshot.steps, config.step_goal),
            "distance_goal_meters": config.distance_goal_meters,
            "distance_progress": distance_progress(
                snapshot.distance_meters,
                snapshot.steps,
                config.distance_goal_meters,
                config.stride_length_meters,
            ),
            "updated_at": updated_at,
        }

    def get_settings(self) -> UserSettings:
        return self._settings

    def update_settings(self, settings: UserSettings) -> UserSettings:
        """校验、保存并立即应用用户设置。"""

        config = settings.apply_to(self._config)
        self.aggregator.update_config(config)
        self._config = config
        self._settings = settings
        try:
            save_user_settings(settings, self._settings_path)
        except OSError:
            logger.warning("无法写入用户设置", exc_info=True)
        logger.info(
            "更新设置: 里程碑=%s, 久坐阈值=%.1f 分钟, 步数目标=%s",
            settings.milestone_size,
            settings.inactivity_timeout_minutes,
            settings.step_goal,
        )
        return settings

    def shutdown(self) -> None:
        self.aggregator.stop()

"""活动聚合器：融合运动、计步与久坐时钟三路数据，维护唯一快照。"""

from __future__ import annotations

import collections
import dataclasses
import datetime as dt
import logging
import threading
from typing import Callable, Deque, List, Optional, Tuple

from stepclock.adapters.base import MotionSource, SensorUnavailableError, StepSource
from stepclock.config import AppConfig
from stepclock.core.display import distance_display
from stepclock.core.snapshot import ActivitySnapshot, Vector3
from stepclock.core.ticker import PeriodicTicker, Ticker
from stepclock.notifiers.base import LoggingNotifier, Notifier

logger = logging.getLogger(__name__)

START_MESSAGE = "Tracking started."
STOP_MESSAGE = "Tracking paused."

SnapshotObserver = Callable[[ActivitySnapshot], None]
SideEffect = Tuple[Callable[[Optional[str]], None], str]


class ConfigurationError(ValueError):
    """规则参数非法，聚合器无法构建。"""


def milestone_message(steps: int) -> str:
    return f"Great job. {steps} steps reached."


def inactivity_message(timeout_seconds: float) -> str:
    minutes = timeout_seconds / 60.0
    return f"You have been inactive for {minutes:g} minutes. A short walk would help."


def _as_utc(moment: dt.datetime) -> dt.datetime:
    # 无时区的时间按本地时间解释
    if moment.tzinfo is None:
        return moment.astimezone(dt.timezone.utc)
    return moment


def _validate(config: AppConfig) -> None:
    # model_construct 或 model_copy 可能绕过 pydantic 校验
    if config.milestone_size <= 0:
        raise ConfigurationError(f"milestone_size must be positive, got {config.milestone_size}")
    if config.inactivity_timeout_seconds <= 0:
        raise ConfigurationError(
            f"inactivity_timeout_seconds must be positive, got {config.inactivity_timeout_seconds}"
        )


class ActivityAggregator:
    """活动状态的唯一持有者。

    三路数据源各自在自己的线程上推送事件，所有状态修改都在同一把锁内串行执行。
    每次修改产生的快照按修改顺序排队，在锁外逐个投递给观察者；观察者中再调用
    `start()`/`stop()` 只会把新快照排在队尾，不会打乱顺序。数据源的回调绑定到启动时的会话，
    `stop()` 返回后迟到的回调会被丢弃。
    """

    def __init__(
        self,
        motion_source: Optional[MotionSource] = None,
        step_source: Optional[StepSource] = None,
        clock: Optional[Ticker] = None,
        notifier: Optional[Notifier] = None,
        config: Optional[AppConfig] = None,
    ) -> None:
        self._config = config or AppConfig.load_default()
        _validate(self._config)
        self._motion_source = motion_source
        self._step_source = step_source
        self._owns_clock = clock is None
        self._clock: Ticker = clock or self._build_clock()
        self._notifier = notifier or LoggingNotifier()

        self._lock = threading.RLock()
        self._lifecycle_lock = threading.RLock()
        self._observers: List[SnapshotObserver] = []
        self._pending: Deque[ActivitySnapshot] = collections.deque()
        self._delivering = False
        self._snapshot = ActivitySnapshot()
        self._last_movement_at = self._now()
        self._last_milestone = 0
        self._session = 0
        self._detach: List[Callable[[], None]] = []

    # ------------------------------------------------------------------
    # 生命周期

    def start(self) -> None:
        """开始追踪；已在追踪时不做任何事，避免重复订阅。"""

        with self._lifecycle_lock:
            with self._lock:
                if self._snapshot.tracking:
                    return
                self._session += 1
                session = self._session
                self._last_milestone = 0
                self._mutate(
                    lambda snap: (dataclasses.replace(snap, tracking=True, feedback_message=START_MESSAGE), [])
                )
            logger.info("开始追踪，会话 #%s", session)
            self._attach(session)
        self._deliver_pending()

    def stop(self) -> None:
        """停止追踪，保留已累计的步数与距离，可重复调用。"""

        with self._lifecycle_lock:
            with self._lock:
                if not self._snapshot.tracking:
                    return
                self._session += 1
                self._mutate(
                    lambda snap: (dataclasses.replace(snap, tracking=False, feedback_message=STOP_MESSAGE), [])
                )
            for detach in reversed(self._detach):
                detach()
            self._detach = []
            logger.info("追踪已暂停")
        self._deliver_pending()

    def toggle(self) -> ActivitySnapshot:
        if self.current_snapshot().tracking:
            self.stop()
        else:
            self.start()
        return self.current_snapshot()

    @property
    def tracking(self) -> bool:
        return self.current_snapshot().tracking

    def _build_clock(self) -> Ticker:
        return PeriodicTicker(self._config.inactivity_tick_interval_seconds, name="stepclock-inactivity")

    def _attach(self, session: int) -> None:
        config = self._config
        if self._owns_clock:
            self._clock = self._build_clock()

        motion = self._motion_source
        if motion is not None:
            on_accel = self._bind(session, self._apply_acceleration)
            on_rotation = self._bind(session, self._apply_rotation)
            motion.add_acceleration_handler(on_accel)
            motion.add_rotation_handler(on_rotation)

            def _detach_motion() -> None:
                motion.remove_acceleration_handler(on_accel)
                motion.remove_rotation_handler(on_rotation)
                motion.stop()

            self._detach.append(_detach_motion)
            try:
                motion.start(config.accel_sample_rate_hz, config.gyro_sample_rate_hz)
            except SensorUnavailableError as exc:
                logger.warning("运动传感器不可用，继续运行但该数据流保持静默: %s", exc)

        steps = self._step_source
        if steps is not None:
            on_steps = self._bind(session, self._apply_steps)
            steps.add_step_handler(on_steps)

            def _detach_steps() -> None:
                steps.remove_step_handler(on_steps)
                steps.stop()

            self._detach.append(_detach_steps)
            try:
                steps.start(self._now())
            except SensorUnavailableError as exc:
                logger.warning("计步器不可用，继续运行但该数据流保持静默: %s", exc)

        self._clock.start(self._bind(session, self._apply_tick))
        self._detach.append(self._clock.stop)

    def _bind(self, session: int, apply: Callable[..., Tuple[ActivitySnapshot, List[SideEffect]]]):
        def _deliver(*args) -> None:
            self._dispatch(apply, *args, session=session)

        return _deliver

    # ------------------------------------------------------------------
    # 事件处理

    def on_motion_event(
        self,
        acceleration: Optional[Vector3] = None,
        rotation_rate: Optional[Vector3] = None,
    ) -> None:
        """同时更新加速度与角速度，只通知一次。"""

        def _apply(snap: ActivitySnapshot) -> Tuple[ActivitySnapshot, List[SideEffect]]:
            if acceleration is not None:
                snap, _ = self._apply_acceleration(snap, acceleration)
            if rotation_rate is not None:
                snap, _ = self._apply_rotation(snap, rotation_rate)
            return snap, []

        self._dispatch(_apply)

    def on_acceleration(self, acceleration: Vector3) -> None:
        self._dispatch(self._apply_acceleration, acceleration)

    def on_rotation(self, rotation_rate: Vector3) -> None:
        self._dispatch(self._apply_rotation, rotation_rate)

    def on_step_event(
        self,
        steps: int,
        distance_meters: Optional[float] = None,
        event_time: Optional[dt.datetime] = None,
    ) -> None:
        self._dispatch(self._apply_steps, steps, distance_meters, event_time)

    def on_inactivity_tick(self, now: Optional[dt.datetime] = None) -> None:
        self._dispatch(self._apply_tick, now)

    def _apply_acceleration(
        self, snap: ActivitySnapshot, acceleration: Vector3
    ) -> Tuple[ActivitySnapshot, List[SideEffect]]:
        if acceleration.magnitude > self._config.movement_accel_threshold:
            self._last_movement_at = self._now()
        return dataclasses.replace(snap, acceleration=acceleration), []

    def _apply_rotation(
        self, snap: ActivitySnapshot, rotation_rate: Vector3
    ) -> Tuple[ActivitySnapshot, List[SideEffect]]:
        if not rotation_rate.is_zero():
            self._last_movement_at = self._now()
        return dataclasses.replace(snap, rotation_rate=rotation_rate), []

    def _apply_steps(
        self,
        snap: ActivitySnapshot,
        steps: int,
        distance_meters: Optional[float] = None,
        event_time: Optional[dt.datetime] = None,
    ) -> Tuple[ActivitySnapshot, List[SideEffect]]:
        steps = max(0, int(steps or 0))
        if distance_meters is not None:
            distance_meters = max(0.0, float(distance_meters))
        self._last_movement_at = self._now()

        updated = dataclasses.replace(
            snap,
            steps=steps,
            distance_meters=distance_meters,
            steps_updated_at=_as_utc(event_time) if event_time is not None else snap.steps_updated_at,
            inactive=False,
        )

        effects: List[SideEffect] = []
        size = self._config.milestone_size
        reached = (steps // size) * size
        if reached > 0 and reached > self._last_milestone:
            # 每个倍数只触发一次，重复投递相同步数不会再次触发
            self._last_milestone = reached
            message = milestone_message(reached)
            updated = dataclasses.replace(updated, feedback_message=message)
            if self._config.notifications_enabled:
                effects.append((self._notifier.notify_success, message))
            logger.info("达成步数里程碑 %s", reached)
        return updated, effects

    def _apply_tick(
        self, snap: ActivitySnapshot, now: Optional[dt.datetime] = None
    ) -> Tuple[ActivitySnapshot, List[SideEffect]]:
        now = _as_utc(now or self._now())
        idle_seconds = (now - self._last_movement_at).total_seconds()
        if idle_seconds < self._config.inactivity_timeout_seconds:
            return dataclasses.replace(snap, inactive=False), []

        effects: List[SideEffect] = []
        if not snap.inactive:
            message = inactivity_message(self._config.inactivity_timeout_seconds)
            snap = dataclasses.replace(snap, feedback_message=message)
            if self._config.notifications_enabled:
                effects.append((self._notifier.notify_warning, message))
            logger.info("久坐 %.0f 秒，进入不活跃状态", idle_seconds)
        return dataclasses.replace(snap, inactive=True), effects

    # ------------------------------------------------------------------
    # 状态读写

    def _dispatch(self, apply, *args, session: Optional[int] = None) -> None:
        with self._lock:
            if session is not None and (session != self._session or not self._snapshot.tracking):
                return
            effects = self._mutate(lambda snap: apply(snap, *args))
        self._deliver_pending()
        self._fire(effects)

    def _mutate(
        self, apply: Callable[[ActivitySnapshot], Tuple[ActivitySnapshot, List[SideEffect]]]
    ) -> List[SideEffect]:
        # 调用方持有 _lock
        previous = self._snapshot
        updated, effects = apply(previous)
        self._snapshot = updated
        if updated != previous:
            self._pending.append(updated)
        return effects

    def _deliver_pending(self) -> None:
        """在锁外按修改顺序投递排队的快照，同一时刻只有一个线程在投递。"""

        with self._lock:
            if self._delivering:
                return
            self._delivering = True
        try:
            while True:
                with self._lock:
                    if not self._pending:
                        self._delivering = False
                        return
                    snapshot = self._pending.popleft()
                    observers = list(self._observers)
                for observer in observers:
                    try:
                        observer(snapshot)
                    except Exception:
                        logger.warning("快照观察者执行失败", exc_info=True)
        except BaseException:
            with self._lock:
                self._delivering = False
            raise

    def _fire(self, effects: List[SideEffect]) -> None:
        for effect, message in effects:
            try:
                effect(message)
            except Exception:
                logger.warning("反馈通知发送失败", exc_info=True)

    def current_snapshot(self) -> ActivitySnapshot:
        with self._lock:
            return self._snapshot

    def subscribe(self, observer: SnapshotObserver) -> Callable[[], None]:
        """登记快照观察者，返回取消订阅函数。"""

        with self._lock:
            self._observers.append(observer)

        def _unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return _unsubscribe

    def distance_display(self) -> str:
        snap = self.current_snapshot()
        return distance_display(snap.distance_meters, snap.steps, self._config.stride_length_meters)

    @property
    def config(self) -> AppConfig:
        return self._config

    def update_config(self, config: AppConfig) -> None:
        """更新规则参数；采样率与时钟间隔在下一次 start() 时生效（注入的时钟除外）。"""

        _validate(config)
        with self._lock:
            self._config = config
            size = config.milestone_size
            self._last_milestone = max(self._last_milestone, (self._snapshot.steps // size) * size)

    def _now(self) -> dt.datetime:
        return dt.datetime.now(dt.timezone.utc)

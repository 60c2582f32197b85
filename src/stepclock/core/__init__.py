"""核心业务逻辑：快照模型、展示辅助与周期时钟。

聚合器位于 `stepclock.core.activity_engine`，它依赖传感器适配器，故不在此处导出。
"""

from .display import distance_display, distance_progress, step_progress
from .snapshot import ActivitySnapshot, Vector3
from .ticker import PeriodicTicker, Ticker

__all__ = [
    "ActivitySnapshot",
    "PeriodicTicker",
    "Ticker",
    "Vector3",
    "distance_display",
    "distance_progress",
    "step_progress",
]

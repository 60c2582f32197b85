"""距离与目标进度的展示辅助函数（纯函数，无状态）。"""

from __future__ import annotations

from typing import Optional

DEFAULT_STRIDE_METERS = 0.78
ESTIMATE_MARKER = "~"


def estimate_distance(steps: int, stride_meters: float = DEFAULT_STRIDE_METERS) -> float:
    return max(0, steps) * stride_meters


def format_meters(meters: float) -> str:
    if meters >= 1000:
        return "%.2f km" % (meters / 1000)
    return "%.0f m" % meters


def distance_display(
    distance_meters: Optional[float],
    steps: int,
    stride_meters: float = DEFAULT_STRIDE_METERS,
) -> str:
    """生成距离文本。

    传感器提供原生距离时直接格式化；否则按步数乘以步长估算，
    并加上 ``~`` 前缀表示估算值。≥1000 米时以公里显示两位小数。
    """

    if distance_meters is not None:
        return format_meters(distance_meters)
    return ESTIMATE_MARKER + format_meters(estimate_distance(steps, stride_meters))


def step_progress(steps: int, goal: int) -> float:
    if goal <= 0:
        return 0.0
    return min(max(steps, 0) / goal, 1.0)


def distance_progress(
    distance_meters: Optional[float],
    steps: int,
    goal_meters: float,
    stride_meters: float = DEFAULT_STRIDE_METERS,
) -> float:
    if goal_meters <= 0:
        return 0.0
    meters = distance_meters if distance_meters is not None else estimate_distance(steps, stride_meters)
    return min(max(meters, 0.0) / goal_meters, 1.0)

"""传感器数据源适配器。"""

from .base import MotionSource, SensorSource, SensorUnavailableError, StepSource
from .simulated import SimulatedMotionSource, SimulatedStepSource
from .synthetic import ManualTicker, SyntheticMotionSource, SyntheticStepSource

__all__ = [
    "ManualTicker",
    "MotionSource",
    "SensorSource",
    "SensorUnavailableError",
    "SimulatedMotionSource",
    "SimulatedStepSource",
    "StepSource",
    "SyntheticMotionSource",
    "SyntheticStepSource",
]

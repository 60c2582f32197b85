"""对外发布的活动快照模型。"""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Vector3:
    """三轴向量，加速度单位为 g，角速度单位为 rad/s。"""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def is_zero(self) -> bool:
        return self.x == 0.0 and self.y == 0.0 and self.z == 0.0


ZERO_VECTOR = Vector3()
READY_MESSAGE = "Ready"


@dataclass(frozen=True)
class ActivitySnapshot:
    """聚合后的活动快照，每次变更整体替换。"""

    tracking: bool = False
    steps: int = 0
    distance_meters: Optional[float] = None
    acceleration: Vector3 = field(default=ZERO_VECTOR)
    rotation_rate: Vector3 = field(default=ZERO_VECTOR)
    feedback_message: str = READY_MESSAGE
    inactive: bool = False
    steps_updated_at: Optional[dt.datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.steps_updated_at is not None:
            data["steps_updated_at"] = self.steps_updated_at.isoformat()
        return data

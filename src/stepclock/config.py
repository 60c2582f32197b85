"""应用配置模型。"""

from __future__ import annotations

import importlib.util
import logging
from pathlib import Path
from types import ModuleType
from typing import Any, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).resolve().parents[2]


class AppConfig(BaseModel):
    """总配置，规则参数与传感器采样参数。"""

    milestone_size: int = Field(500, gt=0)
    inactivity_timeout_seconds: float = Field(1800.0, gt=0.0)
    movement_accel_threshold: float = Field(0.03, ge=0.0)
    inactivity_tick_interval_seconds: float = Field(10.0, gt=0.0)
    accel_sample_rate_hz: float = Field(50.0, gt=0.0)
    gyro_sample_rate_hz: float = Field(50.0, gt=0.0)
    stride_length_meters: float = Field(0.78, gt=0.0)
    step_goal: int = Field(8000, gt=0)
    distance_goal_meters: float = Field(5000.0, gt=0.0)
    notifications_enabled: bool = True
    sensor_backend: str = "simulated"
    notifier_backend: str = "log"
    server_host: str = "127.0.0.1"
    server_port: int = Field(8000, ge=1, le=65535)

    @classmethod
    def load_default(cls) -> "AppConfig":
        return cls()

    @classmethod
    def load(cls, local_path: Optional[Path] = None) -> "AppConfig":
        """加载项目根目录的 `config.local.py`。

        该文件可以定义 `load_config()`（返回 AppConfig 或字典），也可以只给出模块级
        `CONFIG` 字典；字典会经过同样的字段校验。文件缺失或内容非法时返回默认配置。
        """

        path = local_path or ROOT_DIR / "config.local.py"
        if not path.exists():
            return cls.load_default()

        module = _exec_local(path)
        if module is None:
            return cls.load_default()

        load_fn = getattr(module, "load_config", None)
        overrides: Any = getattr(module, "CONFIG", None)
        try:
            if callable(load_fn):
                overrides = load_fn()
            if isinstance(overrides, cls):
                return overrides
            if isinstance(overrides, dict):
                return cls.model_validate(overrides)
        except Exception:
            logger.warning("%s 中的配置无效，使用默认配置", path.name, exc_info=True)
            return cls.load_default()

        if overrides is not None:
            logger.warning("%s 返回了无法识别的配置类型 %s", path.name, type(overrides).__name__)
        return cls.load_default()


def _exec_local(path: Path) -> Optional[ModuleType]:
    spec = importlib.util.spec_from_file_location("config_local", path)
    if spec is None or spec.loader is None:
        return None
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)  # type: ignore[arg-type]
    except Exception:
        logger.warning("无法加载 %s，使用默认配置", path, exc_info=True)
        return None
    return module

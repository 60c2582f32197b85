"""简易配置存储，支持加载/保存用户自定义设置。"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from pydantic import ValidationError

from stepclock.config import AppConfig

logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = Path.home() / ".stepclock" / "config.json"


@dataclass
class UserSettings:
    milestone_size: int
    inactivity_timeout_minutes: float
    step_goal: int

    @classmethod
    def from_config(cls, config: AppConfig) -> "UserSettings":
        return cls(
            milestone_size=config.milestone_size,
            inactivity_timeout_minutes=config.inactivity_timeout_seconds / 60.0,
            step_goal=config.step_goal,
        )

    def apply_to(self, config: AppConfig) -> AppConfig:
        """返回覆盖了用户设置的新配置，非法取值会触发 pydantic 校验错误。"""

        data = config.model_dump()
        data.update(
            milestone_size=self.milestone_size,
            inactivity_timeout_seconds=self.inactivity_timeout_minutes * 60.0,
            step_goal=self.step_goal,
        )
        return AppConfig.model_validate(data)

    def to_dict(self) -> dict:
        return {
            "milestone_size": self.milestone_size,
            "inactivity_timeout_minutes": self.inactivity_timeout_minutes,
            "step_goal": self.step_goal,
        }


def load_user_settings(path: Optional[Path] = None, base: Optional[AppConfig] = None) -> Optional[UserSettings]:
    """读取已保存的设置；文件缺少的字段取 base 中的当前值，文件缺失或损坏时返回 None。"""

    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        return None
    try:
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.warning("无法读取用户设置 %s", cfg_path, exc_info=True)
        return None
    if not isinstance(data, dict):
        logger.warning("用户设置格式错误，应为 JSON 对象: %s", cfg_path)
        return None

    fallback = UserSettings.from_config(base or AppConfig.load_default())
    try:
        return UserSettings(
            milestone_size=int(data.get("milestone_size", fallback.milestone_size)),
            inactivity_timeout_minutes=float(
                data.get("inactivity_timeout_minutes", fallback.inactivity_timeout_minutes)
            ),
            step_goal=int(data.get("step_goal", fallback.step_goal)),
        )
    except (TypeError, ValueError):
        logger.warning("用户设置字段类型错误: %s", cfg_path, exc_info=True)
        return None


def resolve_config(base: AppConfig, path: Optional[Path] = None) -> Tuple[AppConfig, UserSettings]:
    """把已保存的设置叠加到 base 上，返回生效配置与对应的设置。

    保存的取值无法通过校验时整体忽略，沿用 base。
    """

    settings = load_user_settings(path, base)
    if settings is not None:
        try:
            return settings.apply_to(base), settings
        except ValidationError:
            logger.warning("用户设置无效，已忽略", exc_info=True)
    return base, UserSettings.from_config(base)


def save_user_settings(settings: UserSettings, path: Optional[Path] = None) -> None:
    cfg_path = path or DEFAULT_CONFIG_PATH
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    # 写临时文件后原子替换
    tmp_path = cfg_path.with_name(cfg_path.name + ".tmp")
    tmp_path.write_text(json.dumps(settings.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
    tmp_path.replace(cfg_path)

"""反馈通知抽象与基础实现。"""

from __future__ import annotations

import abc
import logging
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


class Notifier(abc.ABC):
    """反馈通知接口：里程碑成功与久坐警告，调用方不关心返回值。"""

    @abc.abstractmethod
    def notify_success(self, message: Optional[str] = None) -> None:
        """里程碑达成时触发。"""

        raise NotImplementedError

    @abc.abstractmethod
    def notify_warning(self, message: Optional[str] = None) -> None:
        """进入久坐状态时触发。"""

        raise NotImplementedError


class NullNotifier(Notifier):
    def notify_success(self, message: Optional[str] = None) -> None:
        pass

    def notify_warning(self, message: Optional[str] = None) -> None:
        pass


class LoggingNotifier(Notifier):
    """仅写日志，适用于无桌面通知能力的环境。"""

    def notify_success(self, message: Optional[str] = None) -> None:
        logger.info("里程碑达成: %s", message or "")

    def notify_warning(self, message: Optional[str] = None) -> None:
        logger.warning("久坐提醒: %s", message or "")


class RecordingNotifier(Notifier):
    """记录每次调用，便于测试断言。"""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Optional[str]]] = []

    def notify_success(self, message: Optional[str] = None) -> None:
        self.calls.append(("success", message))

    def notify_warning(self, message: Optional[str] = None) -> None:
        self.calls.append(("warning", message))

    @property
    def success_count(self) -> int:
        return sum(1 for kind, _ in self.calls if kind == "success")

    @property
    def warning_count(self) -> int:
        return sum(1 for kind, _ in self.calls if kind == "warning")

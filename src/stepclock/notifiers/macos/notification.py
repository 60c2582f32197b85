"""rumps 封装的 macOS 通知适配器。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import rumps

from stepclock.notifiers.base import Notifier


@dataclass
class NotificationPayload:
    title: str
    subtitle: str
    informative_text: str


class MacOSNotifier(Notifier):
    """封装 rumps.notification，以系统横幅代替触觉反馈。"""

    def __init__(self, title: str = "stepclock") -> None:
        self._title = title

    def send(self, payload: NotificationPayload) -> None:
        rumps.notification(payload.title, payload.subtitle, payload.informative_text)

    def notify_success(self, message: Optional[str] = None) -> None:
        self.send(NotificationPayload(self._title, "Milestone", message or ""))

    def notify_warning(self, message: Optional[str] = None) -> None:
        self.send(NotificationPayload(self._title, "Time to move", message or ""))

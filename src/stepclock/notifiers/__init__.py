"""反馈通知实现。"""

from .base import LoggingNotifier, Notifier, NullNotifier, RecordingNotifier

__all__ = [
    "LoggingNotifier",
    "Notifier",
    "NullNotifier",
    "RecordingNotifier",
]

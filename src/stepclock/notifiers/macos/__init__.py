"""macOS 通知实现，依赖 rumps。"""

from .notification import MacOSNotifier, NotificationPayload

__all__ = [
    "MacOSNotifier",
    "NotificationPayload",
]

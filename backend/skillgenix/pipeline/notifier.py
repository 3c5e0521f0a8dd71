"""
通知通道实现 - 日志输出与内存记录
"""

from __future__ import annotations

import logging

from ..interfaces import INotifier
from ..models import Notification, NotificationLevel

logger = logging.getLogger(__name__)

_LEVELS = {
    NotificationLevel.INFO: logging.INFO,
    NotificationLevel.PROGRESS: logging.INFO,
    NotificationLevel.SUCCESS: logging.INFO,
    NotificationLevel.WARNING: logging.WARNING,
    NotificationLevel.ERROR: logging.ERROR,
}


class LoggingNotifier(INotifier):
    """把通知写入日志（CLI使用）"""

    def notify(self, notification: Notification) -> None:
        message = notification.title
        if notification.description:
            message = f"{message}: {notification.description}"
        logger.log(_LEVELS[notification.level], message)


class RecordingNotifier(INotifier):
    """记录全部通知（嵌入调用方或测试检查用）"""

    def __init__(self):
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def levels(self) -> list[NotificationLevel]:
        return [n.level for n in self.notifications]

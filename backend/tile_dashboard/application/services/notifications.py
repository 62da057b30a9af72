"""In-process notification queue for transient success/error toasts."""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Literal

logger = logging.getLogger(__name__)

NotificationKind = Literal["success", "error"]


@dataclass(frozen=True)
class Notification:
    message: str
    kind: NotificationKind


class NotificationCenter:
    """FIFO of pending notifications.

    Mutations push; the dashboard drains everything pending on its next
    render and shows each as a toast.
    """

    def __init__(self, max_pending: int = 20) -> None:
        self._pending: deque[Notification] = deque(maxlen=max_pending)

    def push(self, message: str, kind: NotificationKind) -> Notification:
        notification = Notification(message=message, kind=kind)
        self._pending.append(notification)
        logger.debug("Queued %s notification: %s", kind, message)
        return notification

    def success(self, message: str) -> Notification:
        return self.push(message, "success")

    def error(self, message: str) -> Notification:
        return self.push(message, "error")

    def drain(self) -> list[Notification]:
        """Remove and return all pending notifications, oldest first."""
        drained = list(self._pending)
        self._pending.clear()
        return drained

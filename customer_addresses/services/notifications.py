"""
User-facing notifications

Short messages shown after an address operation succeeds or fails.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from customer_addresses.utils.logging import get_logger


@dataclass(frozen=True)
class Notification:
    title: str
    description: Optional[str] = None
    variant: str = "default"  # default, destructive


class Notifier(Protocol):
    def notify(self, notification: Notification) -> None: ...


class LoggingNotifier:
    """Writes notifications to the log; used when no UI is attached"""

    def __init__(self):
        self.logger = get_logger("notifications")

    def notify(self, notification: Notification) -> None:
        if notification.variant == "destructive":
            self.logger.warning(
                f"{notification.title}: {notification.description}",
                extra={"variant": notification.variant},
            )
        else:
            self.logger.info(notification.title, extra={"variant": notification.variant})

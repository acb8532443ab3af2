"""User-visible notices: one channel for warnings, failures and confirmations."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class NoticeLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    message: str
    payment_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {"level": self.level.value, "message": self.message, "payment_id": self.payment_id}


class NoticeChannel:
    """Buffers notices until the request handler drains them into its response."""

    def __init__(self):
        self._pending: list[Notice] = []

    def publish(self, notice: Notice) -> None:
        self._pending.append(notice)

    def info(self, message: str, payment_id: Optional[str] = None) -> None:
        self.publish(Notice(NoticeLevel.INFO, message, payment_id))

    def warning(self, message: str) -> None:
        self.publish(Notice(NoticeLevel.WARNING, message))

    def error(self, message: str) -> None:
        self.publish(Notice(NoticeLevel.ERROR, message))

    def drain(self) -> list[Notice]:
        """Return and forget everything published since the last drain."""
        notices, self._pending = self._pending, []
        return notices

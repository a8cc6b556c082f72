"""Notification models for StudyHub."""

from enum import Enum
from typing import Optional
from pydantic import Field

from studyhub.models.base import CamelModel


class NotificationType(str, Enum):
    """Severity used to style a notification."""
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"


class NotificationBucket(str, Enum):
    """Why the notification exists."""
    MISSED = "missed"
    DUE_TODAY = "due_today"
    DUE_TOMORROW = "due_tomorrow"
    OVERDUE = "overdue"


class NotificationItem(CamelModel):
    """Derived notification; the whole list is rebuilt on every task change."""

    id: int = Field(..., description="Sequential id within one derived list")
    task_id: Optional[str] = Field(None, description="Task the notification refers to")
    text: str
    time: str
    unread: bool = True
    type: NotificationType
    bucket: NotificationBucket

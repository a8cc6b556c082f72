"""Data models for StudyHub."""

from studyhub.models.task import Task, TaskStatus, TaskCategory, TaskPriority
from studyhub.models.stats import WeeklyStats, TrendPoint
from studyhub.models.notification import NotificationItem, NotificationType, NotificationBucket
from studyhub.models.calendar import CalendarCell, CalendarView, ViewMode, StatusFilter
from studyhub.models.user import User, PublicUser, UserData

__all__ = [
    "Task",
    "TaskStatus",
    "TaskCategory",
    "TaskPriority",
    "WeeklyStats",
    "TrendPoint",
    "NotificationItem",
    "NotificationType",
    "NotificationBucket",
    "CalendarCell",
    "CalendarView",
    "ViewMode",
    "StatusFilter",
    "User",
    "PublicUser",
    "UserData",
]

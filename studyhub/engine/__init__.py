"""Task projection and reminder engine for StudyHub."""

from studyhub.engine.time_window import day_short, parse_task_end_time
from studyhub.engine.reminder import ReminderScanner, ReminderAlert, ScanResult, ToneSpec, LoggingAlertSink
from studyhub.engine.calendar_view import calendar_cells, project_calendar, shift_reference, tasks_for_day, week_start
from studyhub.engine.notifications import derive_notifications, mark_all_read, unread_count
from studyhub.engine.stats import StatsAggregator, hour_labels

__all__ = [
    "day_short",
    "parse_task_end_time",
    "ReminderScanner",
    "ReminderAlert",
    "ScanResult",
    "ToneSpec",
    "LoggingAlertSink",
    "calendar_cells",
    "project_calendar",
    "shift_reference",
    "tasks_for_day",
    "week_start",
    "derive_notifications",
    "mark_all_read",
    "unread_count",
    "StatsAggregator",
    "hour_labels",
]

"""Notification derivation for StudyHub.

The notification list is a pure projection of the task collection. It is
rebuilt from scratch on every change, so unread flags reset each time.
"""

from datetime import date
from typing import List, Optional

from studyhub.models.notification import NotificationBucket, NotificationItem, NotificationType
from studyhub.models.task import Task, TaskStatus


def derive_notifications(tasks: List[Task], today: Optional[date] = None) -> List[NotificationItem]:
    """Build a fresh notification list.

    Missed tasks come first, one entry each. Then every task with a due date
    that is not completed is bucketed by its day difference from ``today``:
    0 is due today, 1 is due tomorrow, negative is overdue. Due dates two or
    more days out produce nothing.

    Args:
        tasks: Current task collection
        today: Reference day (defaults to the local date)

    Returns:
        Notifications with sequential ids starting at 1, all unread
    """
    if today is None:
        today = date.today()

    items: List[NotificationItem] = []

    def add(task: Task, text: str, time: str, kind: NotificationType, bucket: NotificationBucket) -> None:
        items.append(
            NotificationItem(
                id=len(items) + 1,
                task_id=task.id,
                text=text,
                time=time,
                unread=True,
                type=kind,
                bucket=bucket,
            )
        )

    for task in tasks:
        if task.status == TaskStatus.MISSED:
            add(task, f"Missed task: {task.title}", "Check schedule", NotificationType.ERROR, NotificationBucket.MISSED)

    for task in tasks:
        if task.due_date is None or task.status == TaskStatus.COMPLETED:
            continue

        diff_days = (task.due_date - today).days
        if diff_days == 0:
            add(task, f"Due today: {task.title}", "Today", NotificationType.WARNING, NotificationBucket.DUE_TODAY)
        elif diff_days == 1:
            add(task, f"Due tomorrow: {task.title}", "Tomorrow", NotificationType.INFO, NotificationBucket.DUE_TOMORROW)
        elif diff_days < 0:
            add(
                task,
                f"Overdue: {task.title}",
                f"{abs(diff_days)} days ago",
                NotificationType.ERROR,
                NotificationBucket.OVERDUE,
            )

    return items


def mark_all_read(items: List[NotificationItem]) -> List[NotificationItem]:
    """Return the same notifications with every unread flag cleared."""
    return [item.model_copy(update={"unread": False}) for item in items]


def unread_count(items: List[NotificationItem]) -> int:
    return sum(1 for item in items if item.unread)

"""Tests for notification derivation."""

from datetime import date

from studyhub.engine.notifications import derive_notifications, mark_all_read, unread_count
from studyhub.models.task import Task, TaskStatus


TODAY = date(2024, 1, 10)


def _task(base, **overrides):
    return Task(**{**base, **overrides})


def test_missed_entries_come_first(sample_task_base):
    tasks = [
        _task(sample_task_base, id="due", title="Essay", due_date=TODAY),
        _task(sample_task_base, id="missed", title="Read Book", status=TaskStatus.MISSED),
    ]
    items = derive_notifications(tasks, today=TODAY)

    assert [i.text for i in items] == ["Missed task: Read Book", "Due today: Essay"]
    assert items[0].time == "Check schedule"
    assert items[0].type == "error"
    assert items[0].bucket == "missed"


def test_due_date_buckets(sample_task_base):
    tasks = [
        _task(sample_task_base, id="today", title="A", due_date=date(2024, 1, 10)),
        _task(sample_task_base, id="tomorrow", title="B", due_date=date(2024, 1, 11)),
        _task(sample_task_base, id="overdue", title="C", due_date=date(2024, 1, 7)),
        _task(sample_task_base, id="later", title="D", due_date=date(2024, 1, 12)),
    ]
    items = derive_notifications(tasks, today=TODAY)

    assert [(i.task_id, i.text, i.time, i.type) for i in items] == [
        ("today", "Due today: A", "Today", "warning"),
        ("tomorrow", "Due tomorrow: B", "Tomorrow", "info"),
        ("overdue", "Overdue: C", "3 days ago", "error"),
    ]


def test_completed_tasks_produce_no_due_entries(sample_task_base):
    tasks = [_task(sample_task_base, status=TaskStatus.COMPLETED, due_date=TODAY)]
    assert derive_notifications(tasks, today=TODAY) == []


def test_ids_are_sequential_and_all_unread(sample_task_base):
    tasks = [
        _task(sample_task_base, id="m", status=TaskStatus.MISSED),
        _task(sample_task_base, id="d", due_date=TODAY),
    ]
    items = derive_notifications(tasks, today=TODAY)

    # The missed task has no due date; the pending one produces a due entry
    assert [i.id for i in items] == [1, 2]
    assert all(i.unread for i in items)
    assert unread_count(items) == 2


def test_mark_all_read(sample_task_base):
    items = derive_notifications([_task(sample_task_base, due_date=TODAY)], today=TODAY)
    read = mark_all_read(items)

    assert unread_count(read) == 0
    assert [i.text for i in read] == [i.text for i in items]
    # Source list is left alone
    assert unread_count(items) == 1


def test_rederiving_resets_unread(sample_task_base):
    tasks = [_task(sample_task_base, due_date=TODAY)]
    read = mark_all_read(derive_notifications(tasks, today=TODAY))
    assert unread_count(read) == 0

    assert unread_count(derive_notifications(tasks, today=TODAY)) == 1


def test_empty_due_date_string_is_treated_as_none(sample_task_base):
    fields = {k: v for k, v in sample_task_base.items() if k != "due_date"}
    task = Task.model_validate({**fields, "dueDate": ""})
    assert task.due_date is None
    assert derive_notifications([task], today=TODAY) == []

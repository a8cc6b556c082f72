"""Calendar view projection for StudyHub.

Derives the calendar cells for a reference date and view mode and assigns
tasks to cells. Tasks recur by weekday label, so membership is decided by the
cell's weekday short name, not by the exact calendar date.
"""

import calendar
from datetime import date, timedelta
from typing import List, Union

from studyhub.models.calendar import CalendarCell, CalendarView, StatusFilter, ViewMode
from studyhub.models.constants import MONTH_GRID_CELLS, MONTH_NAMES, WEEK_DAYS, WEEKDAY_NAMES
from studyhub.models.task import Task


def week_start(day: date) -> date:
    """Return the Monday on or before ``day``."""
    return day - timedelta(days=day.weekday())


def calendar_cells(reference: date, view: Union[ViewMode, str]) -> List[CalendarCell]:
    """Build the ordered (empty) cells for a view.

    - Daily: the reference date only
    - Weekly: Monday..Sunday of the reference week
    - Monthly: a fixed 35-cell grid starting on the Monday on/before the 1st;
      cells outside the month are flagged ``is_current_month=False``

    Args:
        reference: Date the view is centred on
        view: View mode

    Returns:
        Cells in display order
    """
    view = ViewMode(view)

    if view == ViewMode.DAILY:
        return [CalendarCell(name=WEEK_DAYS[reference.weekday()], date=reference, is_current_month=True)]

    if view == ViewMode.WEEKLY:
        start = week_start(reference)
        return [
            CalendarCell(name=WEEK_DAYS[i], date=start + timedelta(days=i), is_current_month=True)
            for i in range(7)
        ]

    first_of_month = reference.replace(day=1)
    start = week_start(first_of_month)
    cells = []
    for i in range(MONTH_GRID_CELLS):
        day = start + timedelta(days=i)
        cells.append(
            CalendarCell(
                name=WEEK_DAYS[i % 7],
                date=day,
                is_current_month=(day.year == reference.year and day.month == reference.month),
            )
        )
    return cells


def tasks_for_day(
    tasks: List[Task],
    day: date,
    status_filter: Union[StatusFilter, str] = StatusFilter.ALL,
) -> List[Task]:
    """Tasks scheduled on ``day``'s weekday that pass the status filter."""
    status_filter = StatusFilter(status_filter)
    day_name = WEEK_DAYS[day.weekday()]
    return [
        task for task in tasks
        if task.day == day_name
        and (status_filter == StatusFilter.ALL or task.status == status_filter.value)
    ]


def format_range_label(reference: date, view: Union[ViewMode, str], cells: List[CalendarCell]) -> str:
    """Human-readable heading for a view, e.g. 'Jan 8 - Jan 14, 2024'.

    Names come from fixed English tables, not the process locale.
    """
    view = ViewMode(view)
    if view == ViewMode.MONTHLY:
        return f"{MONTH_NAMES[reference.month]} {reference.year}"
    if view == ViewMode.DAILY:
        return f"{WEEKDAY_NAMES[reference.weekday()]}, {MONTH_NAMES[reference.month]} {reference.day}, {reference.year}"
    start, end = cells[0].date, cells[-1].date
    return f"{MONTH_NAMES[start.month][:3]} {start.day} - {MONTH_NAMES[end.month][:3]} {end.day}, {end.year}"


def project_calendar(
    tasks: List[Task],
    reference: date,
    view: Union[ViewMode, str] = ViewMode.WEEKLY,
    status_filter: Union[StatusFilter, str] = StatusFilter.ALL,
) -> CalendarView:
    """Project the task collection onto the cells of a calendar view."""
    cells = calendar_cells(reference, view)
    for cell in cells:
        cell.tasks = tasks_for_day(tasks, cell.date, status_filter)
    return CalendarView(
        view=ViewMode(view),
        reference_date=reference,
        label=format_range_label(reference, view, cells),
        cells=cells,
    )


def shift_reference(reference: date, view: Union[ViewMode, str], step: int) -> date:
    """Move the reference date one period back (step=-1) or forward (step=1).

    Monthly navigation keeps the day of month, clamped to the target month's length.
    """
    view = ViewMode(view)
    if view == ViewMode.DAILY:
        return reference + timedelta(days=step)
    if view == ViewMode.WEEKLY:
        return reference + timedelta(days=7 * step)

    month_index = reference.year * 12 + (reference.month - 1) + step
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(reference.day, last_day))

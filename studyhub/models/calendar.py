"""Calendar view models for StudyHub."""

import datetime
from enum import Enum
from typing import List
from pydantic import Field

from studyhub.models.base import CamelModel
from studyhub.models.task import Task


class ViewMode(str, Enum):
    """Calendar granularity."""
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"


class StatusFilter(str, Enum):
    """Status filter applied to calendar membership."""
    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"
    MISSED = "missed"


class CalendarCell(CamelModel):
    """A single derived calendar day."""

    name: str = Field(..., description="Weekday short name")
    date: datetime.date
    is_current_month: bool = True
    tasks: List[Task] = Field(default_factory=list)


class CalendarView(CamelModel):
    """Ordered cells for one view mode around a reference date."""

    view: ViewMode
    reference_date: datetime.date
    label: str
    cells: List[CalendarCell] = Field(default_factory=list)

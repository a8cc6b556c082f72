"""Task data model for StudyHub."""

from datetime import date
from typing import Optional
from enum import Enum
from pydantic import Field, field_validator

from studyhub.models.base import CamelModel


# Monday-first weekday short names (matches datetime.weekday())
WEEK_DAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def validate_day(value: str) -> str:
    """Reject day labels other than the weekday short names."""
    if value not in WEEK_DAYS:
        raise ValueError(f"day must be one of {', '.join(WEEK_DAYS)}")
    return value


class TaskStatus(str, Enum):
    """Task status enumeration."""
    PENDING = "pending"
    COMPLETED = "completed"
    MISSED = "missed"  # Window elapsed while still pending


class TaskCategory(str, Enum):
    """Task category enumeration."""
    MATH = "Math"
    CODING = "Coding"
    HISTORY = "History"
    PHYSICS = "Physics"
    GYM = "Gym"
    READING = "Reading"
    OTHER = "Other"


class TaskPriority(str, Enum):
    """Task priority enumeration."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Task(CamelModel):
    """Scheduled study task.

    A task recurs on its weekday label every week; ``time`` is the textual
    range it occupies on that day. ``due_date`` is an independent calendar date.
    """

    id: str = Field(..., description="Opaque task identifier")
    title: str = Field(..., description="Task title")
    time: str = Field("9:00 AM - 10:00 AM", description="Time range, e.g. '9:00 AM - 11:00 AM'")
    day: str = Field("Mon", description="Weekday short name ('Mon'..'Sun')")
    category: TaskCategory = Field(TaskCategory.OTHER, description="Task category")
    status: TaskStatus = Field(TaskStatus.PENDING, description="Task status")
    priority: TaskPriority = Field(TaskPriority.MEDIUM, description="Task priority")
    color: str = Field("bg-blue-600", description="Display color tag")
    due_date: Optional[date] = Field(None, description="Optional due date (date-only)")

    @field_validator("due_date", mode="before")
    @classmethod
    def _blank_due_date(cls, value):
        # The task form submits an empty string when no due date is picked.
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("day")
    @classmethod
    def _known_day(cls, value: str) -> str:
        return validate_day(value)

"""Aggregate stats models for StudyHub."""

from pydantic import Field

from studyhub.models.base import CamelModel


class WeeklyStats(CamelModel):
    """Independently maintained counters shown on the dashboard."""

    hours_today: float = Field(0.0, ge=0.0, description="Hours focused today")
    tasks_planned: int = Field(0, description="Tasks planned")
    tasks_completed: int = Field(0, description="Tasks completed")
    performance: int = Field(0, ge=0, le=100, description="Performance score (0-100)")


class TrendPoint(CamelModel):
    """One point of a chart series (e.g. minutes focused in an hour bucket)."""

    label: str
    value: float = 0

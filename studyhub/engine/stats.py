"""Stats aggregation for StudyHub.

Counters are maintained incrementally by the callers' actions and are never
recomputed from the task collection; keeping them consistent is the caller's job.
"""

import logging
from typing import List, Optional

from studyhub.models.constants import MAX_LOGGED_MINUTES_PER_HOUR
from studyhub.models.stats import TrendPoint, WeeklyStats

logger = logging.getLogger(__name__)


def hour_labels() -> List[str]:
    """Labels of the 24 hourly buckets: '12 AM', '1 AM', ... '11 PM'."""
    labels = []
    for i in range(24):
        period = "AM" if i < 12 else "PM"
        hour = 12 if i % 12 == 0 else i % 12
        labels.append(f"{hour} {period}")
    return labels


class StatsAggregator:
    """Holds WeeklyStats plus today's hourly activity series."""

    def __init__(self, stats: Optional[WeeklyStats] = None, daily_activity: Optional[List[TrendPoint]] = None):
        self.stats = stats.model_copy() if stats else WeeklyStats()
        self.daily_activity = daily_activity or [TrendPoint(label=label, value=0) for label in hour_labels()]

    def record_task_added(self) -> WeeklyStats:
        self.stats.tasks_planned += 1
        return self.stats

    def record_task_deleted(self) -> WeeklyStats:
        self.stats.tasks_planned -= 1
        return self.stats

    def log_duration(self, hour_label: str, minutes: float) -> WeeklyStats:
        """Record minutes focused in an hour bucket.

        Minutes are clamped to 0..60. The bucket value is replaced, while the
        clamped minutes are added to ``hours_today``.

        Raises:
            ValueError: If the hour label is unknown
        """
        minutes = min(MAX_LOGGED_MINUTES_PER_HOUR, max(0, minutes))

        for point in self.daily_activity:
            if point.label == hour_label:
                point.value = minutes
                break
        else:
            raise ValueError(f"Unknown hour bucket '{hour_label}'")

        self.stats.hours_today += minutes / 60
        logger.debug(f"Logged {minutes} min for {hour_label}; hours today {self.stats.hours_today:.2f}")
        return self.stats

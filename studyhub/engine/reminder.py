"""Missed-task reminder scanning for StudyHub.

Pending tasks whose window has elapsed today are moved to ``missed``. The
first time a given task id is moved, a one-shot alert (tone + desktop
notification) is raised. The scan is re-run on a fixed interval, so the
seen-set of alerted ids is what keeps the alert from repeating.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Protocol, Set

from studyhub.engine.time_window import day_short, parse_task_end_time
from studyhub.models.constants import (
    DEFAULT_TONE_DURATION_SEC,
    DEFAULT_TONE_FREQUENCY_HZ,
    DEFAULT_TONE_PEAK_GAIN,
    DEFAULT_TONE_WAVEFORM,
    MISSED_ALERT_TITLE,
)
from studyhub.models.task import Task, TaskStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToneSpec:
    """Synthesized reminder tone used when no custom tone is uploaded."""
    waveform: str = DEFAULT_TONE_WAVEFORM
    frequency_hz: int = DEFAULT_TONE_FREQUENCY_HZ
    duration_sec: float = DEFAULT_TONE_DURATION_SEC
    peak_gain: float = DEFAULT_TONE_PEAK_GAIN


@dataclass(frozen=True)
class ReminderAlert:
    """Alert raised the first time a task is marked missed."""
    task_id: str
    title: str
    body: str
    custom_tone: Optional[str] = None  # data URL uploaded by the user
    tone: ToneSpec = field(default_factory=ToneSpec)

    def to_dict(self) -> dict:
        return {
            "taskId": self.task_id,
            "title": self.title,
            "body": self.body,
            "customTone": self.custom_tone,
            "tone": {
                "waveform": self.tone.waveform,
                "frequencyHz": self.tone.frequency_hz,
                "durationSec": self.tone.duration_sec,
                "peakGain": self.tone.peak_gain,
            },
        }


class AlertSink(Protocol):
    """Destination for reminder alerts (speaker + OS notifications)."""

    def play_tone(self, alert: ReminderAlert) -> None:
        ...

    def notify(self, title: str, body: str) -> None:
        ...


@dataclass
class ScanResult:
    """Outcome of a single scan tick."""
    tasks: List[Task] = field(default_factory=list)
    missed_ids: List[str] = field(default_factory=list)
    alerts: List[ReminderAlert] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.missed_ids)


class ReminderScanner:
    """Marks elapsed pending tasks as missed and alerts once per task id."""

    def __init__(self, alert_sink: Optional[AlertSink] = None):
        self.alert_sink = alert_sink
        self.triggered_ids: Set[str] = set()

    def reset(self) -> None:
        """Forget alerted ids (called on logout)."""
        self.triggered_ids.clear()

    def scan(
        self,
        tasks: List[Task],
        now: Optional[datetime] = None,
        reminder_tone: Optional[str] = None,
    ) -> ScanResult:
        """Run one scan tick.

        Args:
            tasks: Current task collection (not mutated)
            now: Wall-clock time of the tick (defaults to local now)
            reminder_tone: Custom tone data URL, if the user uploaded one

        Returns:
            ScanResult with the updated collection, ids moved to missed this
            tick and the alerts raised for first-time transitions
        """
        if now is None:
            now = datetime.now()
        today = day_short(now)
        result = ScanResult()

        for task in tasks:
            if task.status != TaskStatus.PENDING or task.day != today:
                result.tasks.append(task)
                continue

            task_end = parse_task_end_time(task.time, now)
            if task_end is None or now <= task_end:
                result.tasks.append(task)
                continue

            result.tasks.append(task.model_copy(update={"status": TaskStatus.MISSED.value}))
            result.missed_ids.append(task.id)

            if task.id not in self.triggered_ids:
                self.triggered_ids.add(task.id)
                alert = ReminderAlert(
                    task_id=task.id,
                    title=MISSED_ALERT_TITLE,
                    body=f"{task.title} was marked as missed.",
                    custom_tone=reminder_tone,
                )
                result.alerts.append(alert)
                self._deliver(alert)

        if result.missed_ids:
            logger.debug(f"Reminder scan marked {len(result.missed_ids)} task(s) missed")
        return result

    def _deliver(self, alert: ReminderAlert) -> None:
        if self.alert_sink is None:
            return
        # Playback and notification permission failures must not stop the scan.
        try:
            self.alert_sink.play_tone(alert)
        except Exception as e:
            logger.warning(f"Reminder tone playback failed for task {alert.task_id}: {type(e).__name__}")
        try:
            self.alert_sink.notify(alert.title, alert.body)
        except Exception as e:
            logger.warning(f"Reminder notification failed for task {alert.task_id}: {type(e).__name__}")


class LoggingAlertSink:
    """Alert sink for headless sessions: records alerts in the log."""

    def play_tone(self, alert: ReminderAlert) -> None:
        source = "custom tone" if alert.custom_tone else f"{alert.tone.frequency_hz} Hz {alert.tone.waveform}"
        logger.info(f"Playing reminder ({source}) for task {alert.task_id}")

    def notify(self, title: str, body: str) -> None:
        logger.info(f"{title}: {body}")

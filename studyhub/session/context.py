"""Dashboard application context.

``DashboardSession`` owns everything the dashboard shell holds while a user
is signed in: the task store, stats, derived notifications, calendar
position, reminder settings and the background reminder scan. Its lifecycle
is tied to login/logout. State changes are persisted to the backend through a
single debounced bulk save.
"""

import logging
import threading
from datetime import date, datetime
from typing import Callable, List, Optional
import requests

from studyhub.client.api_client import ApiError, AuthResult, StudyHubClient
from studyhub.engine.calendar_view import project_calendar, shift_reference
from studyhub.engine.notifications import derive_notifications, mark_all_read, unread_count
from studyhub.engine.reminder import AlertSink, LoggingAlertSink, ReminderScanner, ScanResult
from studyhub.engine.stats import StatsAggregator
from studyhub.models.calendar import CalendarView, StatusFilter, ViewMode
from studyhub.models.constants import (
    REMINDER_SCAN_INTERVAL_SECONDS,
    SAMPLE_STATS,
    SAMPLE_TASKS,
    SAVE_DEBOUNCE_SECONDS,
)
from studyhub.models.notification import NotificationItem
from studyhub.models.stats import WeeklyStats
from studyhub.models.task import Task
from studyhub.models.user import PublicUser, UserData
from studyhub.session.debounce import DebouncedCall
from studyhub.session.reminder_loop import PeriodicTask
from studyhub.session.task_store import TaskStore

logger = logging.getLogger(__name__)


def _sample_tasks() -> List[Task]:
    return [task.model_copy() for task in SAMPLE_TASKS]


class DashboardSession:
    """Application context for one dashboard user."""

    def __init__(
        self,
        client: Optional[StudyHubClient] = None,
        alert_sink: Optional[AlertSink] = None,
        clock: Callable[[], datetime] = datetime.now,
        scan_interval: float = REMINDER_SCAN_INTERVAL_SECONDS,
        save_delay: float = SAVE_DEBOUNCE_SECONDS,
        timer_factory=threading.Timer,
        run_reminder_loop: bool = True,
    ):
        self.client = client or StudyHubClient()
        self._clock = clock
        self._lock = threading.RLock()
        self._hydrated = False
        self._run_reminder_loop = run_reminder_loop

        self.token: Optional[str] = None
        self.user: Optional[PublicUser] = None
        self.profile_image: Optional[str] = None
        self.reminder_enabled = False
        self.reminder_tone: Optional[str] = None

        self.view_mode = ViewMode.WEEKLY
        self.current_date: date = clock().date()

        self.notifications: List[NotificationItem] = []
        self.stats_aggregator = StatsAggregator(SAMPLE_STATS)
        self.store = TaskStore(_sample_tasks())
        self.store.subscribe(self._on_tasks_changed)
        self.notifications = derive_notifications(self.store.list(), self.current_date)

        self.scanner = ReminderScanner(alert_sink or LoggingAlertSink())
        self.reminder_loop = PeriodicTask(scan_interval, self.scan_reminders, name="reminder-scan")
        self._saver = DebouncedCall(save_delay, self._save_now, timer_factory=timer_factory)

    # Session lifecycle

    @property
    def logged_in(self) -> bool:
        return self.token is not None

    @property
    def stats(self) -> WeeklyStats:
        return self.stats_aggregator.stats

    def register(self, name: str, email: str, password: str) -> PublicUser:
        """Create an account and start a session.

        Raises:
            ApiError: If the backend rejects the registration
        """
        result = self.client.register(name.strip(), email, password)
        self._hydrate(result)
        return result.user

    def login(self, email: str, password: str) -> PublicUser:
        """Sign in and start a session.

        Raises:
            ApiError: If the credentials are rejected
        """
        result = self.client.login(email, password)
        self._hydrate(result)
        return result.user

    def resume(self, token: str) -> bool:
        """Restore a session from a stored token; resets to logged-out on any failure."""
        self.client.token = token
        try:
            user = self.client.me()
            data = self.client.fetch_user_data()
        except (ApiError, requests.RequestException) as e:
            logger.info(f"Could not resume session: {type(e).__name__}")
            self._reset()
            return False
        self._hydrate(AuthResult(token=token, user=user, data=data))
        return True

    def logout(self) -> None:
        if self.token is not None:
            try:
                self.client.logout()
            except (ApiError, requests.RequestException) as e:
                logger.debug(f"Backend logout failed: {type(e).__name__}")
        self._reset()

    def _hydrate(self, result: AuthResult) -> None:
        data: UserData = result.data
        with self._lock:
            if self.user is not None and self.user.id != result.user.id:
                # Sample task ids are shared between accounts
                self.scanner.reset()
            self.token = result.token
            self.user = result.user
            self.profile_image = data.profile_image
            self.reminder_enabled = bool(data.reminder_enabled)
            self.reminder_tone = data.reminder_tone
            self.stats_aggregator = StatsAggregator(data.stats or SAMPLE_STATS)
            self._hydrated = True
            self.store.replace_all(data.tasks if data.tasks else _sample_tasks())
        logger.debug(f"Session hydrated for user {result.user.id}")
        self._sync_reminder_loop()

    def _reset(self) -> None:
        self._saver.cancel()
        self.reminder_loop.stop()
        with self._lock:
            self._hydrated = False
            self.token = None
            self.user = None
            self.client.token = None
            self.profile_image = None
            self.reminder_enabled = False
            self.reminder_tone = None
            self.stats_aggregator = StatsAggregator(SAMPLE_STATS)
            self.scanner.reset()
            self.store.replace_all(_sample_tasks())

    # Task edits

    def add_task(self, task: Task) -> Task:
        with self._lock:
            self.store.add(task)
            self.stats_aggregator.record_task_added()
        self._changed()
        return task

    def update_task(self, task: Task) -> Task:
        with self._lock:
            return self.store.update(task)

    def delete_task(self, task_id: str) -> bool:
        with self._lock:
            deleted = self.store.delete(task_id)
            if deleted:
                self.stats_aggregator.record_task_deleted()
        if deleted:
            self._changed()
        return deleted

    # Stats and settings

    def log_duration(self, hour_label: str, minutes: float) -> WeeklyStats:
        with self._lock:
            stats = self.stats_aggregator.log_duration(hour_label, minutes)
        self._changed()
        return stats

    def set_profile_image(self, data_url: Optional[str]) -> None:
        self.profile_image = data_url
        self._changed()

    def set_reminder_tone(self, data_url: Optional[str]) -> None:
        self.reminder_tone = data_url
        self._changed()

    def set_reminder_enabled(self, enabled: bool) -> None:
        self.reminder_enabled = enabled
        self._changed()
        self._sync_reminder_loop()

    # Notifications

    def mark_all_read(self) -> None:
        with self._lock:
            self.notifications = mark_all_read(self.notifications)

    @property
    def unread_count(self) -> int:
        return unread_count(self.notifications)

    # Calendar

    def set_view(self, view: ViewMode) -> None:
        self.view_mode = ViewMode(view)

    def go_prev(self) -> date:
        self.current_date = shift_reference(self.current_date, self.view_mode, -1)
        return self.current_date

    def go_next(self) -> date:
        self.current_date = shift_reference(self.current_date, self.view_mode, 1)
        return self.current_date

    def calendar(
        self,
        view: Optional[ViewMode] = None,
        status_filter: StatusFilter = StatusFilter.ALL,
    ) -> CalendarView:
        return project_calendar(self.store.list(), self.current_date, view or self.view_mode, status_filter)

    # Reminders

    def scan_reminders(self, now: Optional[datetime] = None) -> Optional[ScanResult]:
        """Run one reminder tick; returns None when reminders are inactive."""
        with self._lock:
            if not self.logged_in or not self.reminder_enabled:
                return None
            result = self.scanner.scan(self.store.list(), now or self._clock(), self.reminder_tone)
            if result.changed:
                self.store.replace_all(result.tasks)
            return result

    def _sync_reminder_loop(self) -> None:
        if not self._run_reminder_loop:
            return
        if self.logged_in and self.reminder_enabled:
            self.reminder_loop.start()
        else:
            self.reminder_loop.stop()

    # Persistence

    def _on_tasks_changed(self, tasks: List[Task]) -> None:
        self.notifications = derive_notifications(tasks, self._clock().date())
        self._changed()

    def _changed(self) -> None:
        if self.logged_in and self._hydrated:
            self._saver.trigger()

    def _save_now(self) -> None:
        with self._lock:
            if not self.logged_in or not self._hydrated:
                return
            tasks = self.store.list()
            stats = self.stats.model_copy()
            profile_image = self.profile_image
            reminder_enabled = self.reminder_enabled
            reminder_tone = self.reminder_tone
        try:
            self.client.save_user_data(tasks, stats, profile_image, reminder_enabled, reminder_tone)
        except (ApiError, requests.RequestException) as e:
            # Dropped; the next change schedules another save.
            logger.warning(f"Saving dashboard data failed: {type(e).__name__}")

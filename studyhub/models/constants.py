"""Constants for StudyHub.

This module centralizes magic numbers and default values used throughout the application.
"""

from studyhub.models.stats import WeeklyStats
from studyhub.models.task import WEEK_DAYS, Task, TaskCategory, TaskPriority, TaskStatus  # noqa: F401


# English labels for calendar headings, independent of the process locale
WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
MONTH_NAMES = [
    "", "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# Reminder scanning
REMINDER_SCAN_INTERVAL_SECONDS = 30

# Persistence
SAVE_DEBOUNCE_SECONDS = 0.6

# Auth
MIN_PASSWORD_LENGTH = 6

# Calendar
MONTH_GRID_CELLS = 35

# Time log
MAX_LOGGED_MINUTES_PER_HOUR = 60

# Synthesized reminder tone used when the user has not uploaded one
DEFAULT_TONE_WAVEFORM = "triangle"
DEFAULT_TONE_FREQUENCY_HZ = 880
DEFAULT_TONE_DURATION_SEC = 0.55
DEFAULT_TONE_PEAK_GAIN = 0.35

MISSED_ALERT_TITLE = "Task missed"

# Seed data for a session with nothing stored yet
SAMPLE_STATS = WeeklyStats(hours_today=4.5, tasks_planned=12, tasks_completed=8, performance=76)

SAMPLE_TASKS = [
    Task(id="1", title="Math Study", time="9:00am - 11:00am", day="Mon", category=TaskCategory.MATH,
         status=TaskStatus.COMPLETED, color="bg-blue-600", priority=TaskPriority.HIGH),
    Task(id="2", title="Gym Workout", time="7:00am - 8:00am", day="Tue", category=TaskCategory.GYM,
         status=TaskStatus.COMPLETED, color="bg-green-500", priority=TaskPriority.MEDIUM),
    Task(id="3", title="DSA Practice", time="6:00pm - 8:00pm", day="Wed", category=TaskCategory.CODING,
         status=TaskStatus.PENDING, color="bg-red-500", priority=TaskPriority.HIGH),
    Task(id="4", title="History Review", time="2:00pm - 3:30pm", day="Thu", category=TaskCategory.HISTORY,
         status=TaskStatus.COMPLETED, color="bg-green-600", priority=TaskPriority.LOW),
    Task(id="5", title="Physics Class", time="10:00am - 12:00pm", day="Fri", category=TaskCategory.PHYSICS,
         status=TaskStatus.COMPLETED, color="bg-blue-500", priority=TaskPriority.MEDIUM),
    Task(id="6", title="Read Book", time="4:00pm - 5:00pm", day="Sat", category=TaskCategory.READING,
         status=TaskStatus.MISSED, color="bg-red-500", priority=TaskPriority.LOW),
]

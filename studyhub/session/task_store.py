"""In-memory task collection for StudyHub."""

import logging
from typing import Callable, Iterable, List, Optional

from studyhub.models.task import Task

logger = logging.getLogger(__name__)

TaskListener = Callable[[List[Task]], None]


class TaskStore:
    """Ordered task collection; the single source of truth for projections.

    Listeners are called with a snapshot of the collection after every mutation.
    """

    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        self._tasks: List[Task] = list(tasks or [])
        self._listeners: List[TaskListener] = []

    def subscribe(self, listener: TaskListener) -> None:
        self._listeners.append(listener)

    def list(self) -> List[Task]:
        return list(self._tasks)

    def get(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def add(self, task: Task) -> Task:
        """Append a task.

        Raises:
            ValueError: If a task with the same id exists
        """
        if self.get(task.id) is not None:
            raise ValueError(f"Task {task.id} already exists")
        self._tasks.append(task)
        logger.debug(f"Added task {task.id}: {task.title[:50]}")
        self._notify()
        return task

    def update(self, task: Task) -> Task:
        """Replace the task with the same id, keeping its position.

        Raises:
            ValueError: If the task does not exist
        """
        for index, existing in enumerate(self._tasks):
            if existing.id == task.id:
                self._tasks[index] = task
                logger.debug(f"Updated task {task.id}: {task.title[:50]}")
                self._notify()
                return task
        raise ValueError(f"Task {task.id} not found")

    def delete(self, task_id: str) -> bool:
        """Remove a task by id; returns False if it was not present."""
        remaining = [task for task in self._tasks if task.id != task_id]
        if len(remaining) == len(self._tasks):
            return False
        self._tasks = remaining
        logger.debug(f"Deleted task {task_id}")
        self._notify()
        return True

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Swap in a whole new collection (hydration, reminder scans)."""
        self._tasks = list(tasks)
        self._notify()

    def __len__(self) -> int:
        return len(self._tasks)

    def _notify(self) -> None:
        snapshot = self.list()
        for listener in self._listeners:
            listener(snapshot)

"""Repository for per-user dashboard data.

Each save is a whole-blob read-modify-write of the user's row. There is no
optimistic locking, so two concurrent writers (e.g. two browser tabs) can
overwrite each other's changes.
"""

import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from studyhub.models.stats import WeeklyStats
from studyhub.models.task import Task
from studyhub.models.user import UserData
from studyhub.database.models import UserDataDB, stats_to_json, tasks_to_json

logger = logging.getLogger(__name__)


class UserDataRepository:
    """Repository for UserData database operations."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> UserData:
        """Get a user's data, or empty defaults if nothing was stored yet."""
        data_db = self._get_row(user_id)
        return data_db.to_pydantic() if data_db else UserData()

    def save(
        self,
        user_id: str,
        *,
        tasks: Optional[List[Task]] = None,
        stats: Optional[WeeklyStats] = None,
        profile_image: Optional[str] = None,
        reminder_enabled: Optional[bool] = None,
        reminder_tone: Optional[str] = None,
    ) -> UserData:
        """Merge the provided fields into the stored blob.

        Fields left as None keep their stored value. A field cannot be cleared
        back to null through this method.
        """
        data_db = self._get_row(user_id)
        if data_db is None:
            data_db = UserDataDB(user_id=user_id, tasks=[], stats=None, reminder_enabled=False)
            self.db.add(data_db)

        if tasks is not None:
            data_db.tasks = tasks_to_json(tasks)
        if stats is not None:
            data_db.stats = stats_to_json(stats)
        if profile_image is not None:
            data_db.profile_image = profile_image
        if reminder_enabled is not None:
            data_db.reminder_enabled = bool(reminder_enabled)
        if reminder_tone is not None:
            data_db.reminder_tone = reminder_tone
        data_db.updated_at = datetime.utcnow()

        try:
            self.db.commit()
            self.db.refresh(data_db)
            logger.debug(f"Saved dashboard data for user {user_id}")
            return data_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save dashboard data for user {user_id}: {type(e).__name__}: {str(e)}")
            raise

    def _get_row(self, user_id: str) -> Optional[UserDataDB]:
        return self.db.query(UserDataDB).filter(UserDataDB.user_id == user_id).first()

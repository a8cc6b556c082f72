"""SQLAlchemy database models for StudyHub."""

import logging
from datetime import datetime
import uuid
from sqlalchemy import Column, String, Text, Boolean, DateTime, JSON, ForeignKey
from pydantic import ValidationError

from studyhub.database.database import Base
from studyhub.models.stats import WeeklyStats
from studyhub.models.task import Task
from studyhub.models.user import User, UserData

logger = logging.getLogger(__name__)


class UserDB(Base):
    """Database model for User."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self) -> User:
        """Convert database model to Pydantic model."""
        return User(
            id=self.id,
            name=self.name,
            email=self.email,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class UserDataDB(Base):
    """Database model for a user's dashboard blob (tasks, stats, settings)."""

    __tablename__ = "user_data"

    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)

    # Tasks and stats are stored as JSON documents in their wire (camelCase) shape
    tasks = Column(JSON, nullable=False, default=list)
    stats = Column(JSON, nullable=True)

    profile_image = Column(Text, nullable=True)
    reminder_enabled = Column(Boolean, nullable=False, default=False)
    reminder_tone = Column(Text, nullable=True)

    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self) -> UserData:
        """Convert database model to Pydantic model.

        Task rows that no longer validate are skipped rather than failing the
        whole blob.
        """
        tasks = []
        for raw in self.tasks or []:
            try:
                tasks.append(Task.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping invalid stored task for user {self.user_id}: {e.error_count()} error(s)")

        stats = None
        if self.stats:
            try:
                stats = WeeklyStats.model_validate(self.stats)
            except ValidationError:
                logger.warning(f"Ignoring invalid stored stats for user {self.user_id}")

        return UserData(
            tasks=tasks,
            stats=stats,
            profile_image=self.profile_image,
            reminder_enabled=bool(self.reminder_enabled),
            reminder_tone=self.reminder_tone,
        )


def tasks_to_json(tasks) -> list:
    """Serialize tasks for the JSON column."""
    return [task.model_dump(mode="json", by_alias=True) for task in tasks]


def stats_to_json(stats):
    """Serialize stats for the JSON column."""
    return stats.model_dump(mode="json", by_alias=True) if stats is not None else None

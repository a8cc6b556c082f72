"""User data models for StudyHub."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from studyhub.models.base import CamelModel
from studyhub.models.stats import WeeklyStats
from studyhub.models.task import Task


class User(BaseModel):
    """User model for StudyHub."""

    id: str = Field(..., description="Unique user identifier (UUID v4)")
    name: str = Field(..., description="User display name")
    email: str = Field(..., description="User email address")
    created_at: datetime = Field(..., description="User creation timestamp")
    updated_at: datetime = Field(..., description="User last update timestamp")

    def public(self) -> "PublicUser":
        return PublicUser(id=self.id, name=self.name, email=self.email)


class PublicUser(BaseModel):
    """User fields safe to return to clients."""

    id: str
    name: str
    email: str


class UserData(CamelModel):
    """Per-user persisted blob: tasks, stats, profile image and reminder settings."""

    tasks: List[Task] = Field(default_factory=list)
    stats: Optional[WeeklyStats] = None
    profile_image: Optional[str] = Field(None, description="Profile image as a data URL")
    reminder_enabled: bool = False
    reminder_tone: Optional[str] = Field(None, description="Custom reminder tone as a data URL")

"""Repository for User database operations."""

import logging
import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from studyhub.models.user import User
from studyhub.database.models import UserDB, UserDataDB

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        user_db = self.db.query(UserDB).filter(UserDB.id == user_id).first()
        return user_db.to_pydantic() if user_db else None

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email (case-insensitive)."""
        user_db = self._query_by_email(email)
        return user_db.to_pydantic() if user_db else None

    def get_password_hash(self, email: str) -> Optional[str]:
        """Get the stored password hash for an email, if the user exists."""
        user_db = self._query_by_email(email)
        return user_db.password_hash if user_db else None

    def create(self, name: str, email: str, password_hash: str) -> User:
        """Create a user together with an empty dashboard blob.

        Raises:
            ValueError: If the email is already registered
        """
        if self._query_by_email(email):
            raise ValueError(f"Email {email} already registered")

        now = datetime.utcnow()
        user_db = UserDB(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        try:
            self.db.add(user_db)
            self.db.flush()
            self.db.add(UserDataDB(user_id=user_db.id, tasks=[], stats=None, reminder_enabled=False, updated_at=now))
            self.db.commit()
            self.db.refresh(user_db)
            logger.debug(f"Created user {user_db.id}")
            return user_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create user: {type(e).__name__}: {str(e)}")
            raise

    def _query_by_email(self, email: str) -> Optional[UserDB]:
        return self.db.query(UserDB).filter(func.lower(UserDB.email) == email.lower()).first()

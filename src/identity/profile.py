"""The caller's own account details."""

import structlog

from identity.models import User
from shared.database import Database
from shared.errors import UserNotFoundError, ValidationError

logger = structlog.get_logger(__name__)

EDITABLE_FIELDS = frozenset({"first_name", "last_name", "phone", "avatar"})


class ProfileService:
    def __init__(self, database: Database) -> None:
        self.database = database

    def get_profile(self, user_id: str) -> User:
        with self.database.transaction(read_only=True) as session:
            user = session.get(User, user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    def update_profile(self, user_id: str, changes: dict) -> User:
        """Update name, phone and avatar. Email and role are not editable here."""
        if "first_name" in changes and not changes["first_name"]:
            raise ValidationError("First name is required")

        with self.database.transaction() as session:
            user = session.get(User, user_id)
            if user is None:
                raise UserNotFoundError()
            for field, value in changes.items():
                if field in EDITABLE_FIELDS:
                    setattr(user, field, value)

        logger.info("Profile updated", user_id=user_id, fields=sorted(set(changes) & EDITABLE_FIELDS))
        return user

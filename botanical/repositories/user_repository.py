"""Credential store: data access for the users table."""

from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from botanical.models.user import User

# Columns that profile/admin updates may touch; credentials and session
# columns have dedicated methods.
UPDATABLE_FIELDS = frozenset({"username", "phone", "user_role"})


class UserRepository:
    """Reads and writes User rows within one request-scoped Session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_by_id(self, user_id: int) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_phone(self, phone: str) -> User | None:
        return self.db.query(User).filter(User.phone == phone).first()

    def phone_exists(self, phone: str) -> bool:
        if not phone:
            return False
        return self.db.query(User.id).filter(User.phone == phone).first() is not None

    def list_page(self, offset: int, limit: int) -> tuple[list[User], int]:
        """Return one page of users ordered by id, plus the total row count."""
        total = self.db.query(User).count()
        users = self.db.query(User).order_by(User.id).offset(offset).limit(limit).all()
        return users, total

    def create(self, user: User) -> User:
        """Insert user. A duplicate phone rolls back and re-raises IntegrityError."""
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        self.db.refresh(user)
        return user

    def save_token(self, user_id: int, token: str, expires_at: datetime) -> None:
        """Replace the stored session; token and expiry go in one UPDATE."""
        self.db.query(User).filter(User.id == user_id).update(
            {User.token: token, User.token_expire_time: expires_at},
            synchronize_session="fetch",
        )
        self.db.commit()

    def save_password_hash(self, user_id: int, password_hash: str) -> None:
        self.db.query(User).filter(User.id == user_id).update(
            {User.password_hash: password_hash},
            synchronize_session="fetch",
        )
        self.db.commit()

    def update_fields(self, user_id: int, fields: dict[str, Any]) -> None:
        """Apply a partial update restricted to UPDATABLE_FIELDS."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        if not fields:
            return
        values = {getattr(User, name): value for name, value in fields.items()}
        # The UPDATE runs immediately, so a duplicate phone fails here, not at commit.
        try:
            self.db.query(User).filter(User.id == user_id).update(
                values, synchronize_session="fetch"
            )
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise

    def delete(self, user_id: int) -> bool:
        deleted = self.db.query(User).filter(User.id == user_id).delete(
            synchronize_session="fetch"
        )
        self.db.commit()
        return deleted > 0

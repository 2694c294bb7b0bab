"""ORM model for application accounts (auth, sessions and RBAC)."""

from sqlalchemy import Column, DateTime, Integer, SmallInteger, String, func

from botanical.models.base import Base

# Role markers stored in user_role.
DEFAULT_ROLE = 1
ADMIN_ROLE = 9


class User(Base):
    """
    Account used for JWT authentication and role-based access control.

    phone is the login key. token/token_expire_time hold the session issued
    by the most recent login and are always written together.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, default="user")
    phone = Column(String(20), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    user_role = Column(SmallInteger, nullable=False, default=DEFAULT_ROLE)
    token = Column(String(500), nullable=True)
    token_expire_time = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

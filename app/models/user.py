"""Staff user model for admin authentication"""

from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Integer, Enum
import enum

from app.database import Base


class UserRole(str, enum.Enum):
    """Staff roles"""
    ADMIN = "admin"
    STAFF = "staff"


class User(Base):
    """Staff users of the admin surface"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Authentication
    username = Column(String(100), unique=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    # Role
    role = Column(Enum(UserRole, values_callable=lambda e: [m.value for m in e]), default=UserRole.STAFF)

    # Status
    is_active = Column(Boolean, default=True)

    # Tokens
    refresh_token = Column(String(500))

    # Timestamps
    last_login = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def has_permission(self, required_role: UserRole) -> bool:
        """Check if user has at least the required role level"""
        role_hierarchy = {
            UserRole.STAFF: 1,
            UserRole.ADMIN: 2,
        }
        return role_hierarchy.get(self.role, 0) >= role_hierarchy.get(required_role, 0)

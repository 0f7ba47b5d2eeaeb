"""User model."""

import enum

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from backoffice.core.database import Base


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class User(Base):
    """User model for authentication and role-gated access."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default=UserRole.USER.value)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    contractors = relationship("Contractor", back_populates="creator")
    documents = relationship("Document", back_populates="creator")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

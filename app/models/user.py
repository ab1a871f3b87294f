"""
User model (participants, organizers, moderators and admins share one table)
"""

import enum
import uuid
from sqlalchemy import Column, String, DateTime, Enum as SAEnum

from app.core.db import Base
from app.utils.dates import utcnow

class UserRole(str, enum.Enum):
    admin = "admin"
    organizer = "organizer"
    moderator = "moderator"
    participant = "participant"

class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone_number = Column(String(50), nullable=True)
    company = Column(String(255), nullable=True)
    job_title = Column(String(255), nullable=True)
    profile_image = Column(String(500), nullable=True)
    role = Column(SAEnum(UserRole), nullable=False, default=UserRole.participant)
    password_hash = Column(String(255), nullable=False, default="")
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

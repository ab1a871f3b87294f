"""
Event model
"""

import enum
import uuid
from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, JSON, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship

from app.core.db import Base
from app.utils.dates import utcnow

class EventStatus(str, enum.Enum):
    draft = "draft"
    published = "published"
    ongoing = "ongoing"
    completed = "completed"
    cancelled = "cancelled"

class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(String(100), nullable=False, index=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    capacity = Column(Integer, nullable=False)
    registration_deadline = Column(DateTime, nullable=False)
    status = Column(SAEnum(EventStatus), nullable=False, default=EventStatus.draft, index=True)
    image = Column(String(500), nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    organizer_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    venue_id = Column(String(36), ForeignKey("venues.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    organizer = relationship("User", lazy="joined")
    venue = relationship("Venue", lazy="joined")
    participants = relationship(
        "Participant",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

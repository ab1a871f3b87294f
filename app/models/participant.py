"""
Participant model: one registration of a user to an event
"""

import enum
import uuid
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship

from app.core.db import Base
from app.utils.dates import utcnow

class ParticipantStatus(str, enum.Enum):
    registered = "registered"
    confirmed = "confirmed"
    attended = "attended"
    cancelled = "cancelled"
    no_show = "no-show"

# Statuses that hold a seat when counting against event capacity
ACTIVE_STATUSES = (
    ParticipantStatus.registered,
    ParticipantStatus.confirmed,
    ParticipantStatus.attended,
)

class Participant(Base):
    __tablename__ = "participants"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    registration_date = Column(DateTime, nullable=False, default=utcnow)
    status = Column(
        SAEnum(ParticipantStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ParticipantStatus.registered,
    )
    company = Column(String(255), nullable=True)
    job_title = Column(String(255), nullable=True)
    dietary_restrictions = Column(String(255), nullable=True)
    special_requirements = Column(Text, nullable=True)
    feedback_rating = Column(Integer, nullable=True)
    feedback_comment = Column(Text, nullable=True)
    feedback_submitted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    event = relationship("Event", back_populates="participants")
    user = relationship("User", lazy="joined")

    __table_args__ = (UniqueConstraint("user_id", "event_id", name="uq_participants_user_event"),)

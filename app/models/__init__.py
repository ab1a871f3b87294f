"""
Database models package
"""

from .user import User, UserRole
from .venue import Venue
from .event import Event, EventStatus
from .participant import Participant, ParticipantStatus

__all__ = [
    "User",
    "UserRole",
    "Venue",
    "Event",
    "EventStatus",
    "Participant",
    "ParticipantStatus",
]

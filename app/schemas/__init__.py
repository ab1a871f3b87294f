"""
Pydantic schemas package
"""

from .common import *
from .event import *
from .participant import *
from .user import *

__all__ = [
    "Pagination",
    "StandardResponse",
    "ErrorResponse",
    "VenueInput",
    "EventCreate",
    "EventUpdate",
    "EventFilters",
    "ParticipantCreate",
    "ParticipantUpdate",
    "CheckInRequest",
    "ProfileUpdate",
    "PasswordChange",
]

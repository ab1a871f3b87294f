"""
Event-related Pydantic schemas
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field

from app.models.event import EventStatus

class VenueInput(BaseModel):
    """Location supplied at event creation; resolved to a venue row"""
    name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    city: Optional[str] = None
    country: Optional[str] = None
    capacity: Optional[int] = Field(default=None, gt=0)
    facilities: List[str] = []

class EventCreate(BaseModel):
    """Schema for creating an event.

    Required fields are optional here so the service can report every
    missing one at once.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    registration_deadline: Optional[datetime] = None
    capacity: Optional[int] = Field(default=None, gt=0)
    status: EventStatus = EventStatus.draft
    image: Optional[str] = None
    tags: List[str] = []
    price: float = Field(default=0, ge=0)
    organizer_id: Optional[str] = None
    venue_id: Optional[str] = None
    venue: Optional[VenueInput] = None

class EventUpdate(BaseModel):
    """Patch for an event: only fields present in the request are applied"""
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    capacity: Optional[int] = Field(default=None, gt=0)
    registration_deadline: Optional[datetime] = None
    status: Optional[EventStatus] = None
    image: Optional[str] = None
    tags: Optional[List[str]] = None
    price: Optional[float] = Field(default=None, ge=0)
    venue_id: Optional[str] = None

class EventFilters(BaseModel):
    """Query filters for listing events"""
    type: Optional[str] = None
    status: Optional[EventStatus] = None
    search: Optional[str] = None
    page: int = 1
    limit: int = 10

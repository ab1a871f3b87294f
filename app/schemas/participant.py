"""
Participant-related Pydantic schemas
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from app.models.participant import ParticipantStatus

class ParticipantCreate(BaseModel):
    """Schema for registering a participant"""
    user_id: Optional[str] = None
    status: ParticipantStatus = ParticipantStatus.registered
    company: Optional[str] = None
    job_title: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    special_requirements: Optional[str] = None

class ParticipantUpdate(BaseModel):
    """Patch for a participant registration"""
    status: Optional[ParticipantStatus] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    special_requirements: Optional[str] = None
    feedback_rating: Optional[int] = Field(default=None, ge=1, le=5)
    feedback_comment: Optional[str] = None
    feedback_submitted_at: Optional[datetime] = None

class CheckInRequest(BaseModel):
    """Scanned QR payload"""
    qrCode: str

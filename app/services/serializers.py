"""
ORM rows to JSON-ready dicts
"""

import enum
from typing import Any, Dict, Optional

from app.models import Event, Participant, User
from app.models.participant import ACTIVE_STATUSES
from app.services.qr_service import QRService
from app.utils.dates import isoformat


def _value(field: Any) -> Any:
    return field.value if isinstance(field, enum.Enum) else field


def serialize_event(event: Event) -> Dict[str, Any]:
    organizer = event.organizer
    venue = event.venue
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "type": event.type,
        "start_date": isoformat(event.start_date),
        "end_date": isoformat(event.end_date),
        "capacity": event.capacity,
        "registration_deadline": isoformat(event.registration_deadline),
        "status": _value(event.status),
        "image": event.image,
        "tags": list(event.tags or []),
        "price": float(event.price or 0),
        "organizer_id": event.organizer_id,
        "venue_id": event.venue_id,
        "participants_count": sum(1 for p in event.participants if p.status in ACTIVE_STATUSES),
        "created_at": isoformat(event.created_at),
        "updated_at": isoformat(event.updated_at),
        "organizer": {
            "id": organizer.id,
            "name": organizer.full_name,
            "email": organizer.email,
        } if organizer else None,
        "venue": {
            "id": venue.id,
            "name": venue.name,
            "address": venue.street,
            "city": venue.city,
            "country": venue.country,
            "capacity": venue.capacity,
        } if venue else None,
    }


def serialize_participant(participant: Participant, with_token: bool = True) -> Dict[str, Any]:
    user: Optional[User] = participant.user
    data = {
        "id": participant.id,
        "user_id": participant.user_id,
        "event_id": participant.event_id,
        "registration_date": isoformat(participant.registration_date),
        "status": _value(participant.status),
        "company": participant.company,
        "job_title": participant.job_title,
        "dietary_restrictions": participant.dietary_restrictions,
        "special_requirements": participant.special_requirements,
        "feedback_rating": participant.feedback_rating,
        "feedback_comment": participant.feedback_comment,
        "feedback_submitted_at": isoformat(participant.feedback_submitted_at),
        "created_at": isoformat(participant.created_at),
        "updated_at": isoformat(participant.updated_at),
        "user": {
            "id": user.id,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "email": user.email,
        } if user else None,
    }
    if with_token:
        data["qrCode"] = QRService.encode_token(participant.id, participant.event_id, participant.user_id)
    return data


def serialize_user(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "phone_number": user.phone_number,
        "company": user.company,
        "job_title": user.job_title,
        "profile_image": user.profile_image,
        "role": _value(user.role),
        "created_at": isoformat(user.created_at),
        "updated_at": isoformat(user.updated_at),
    }

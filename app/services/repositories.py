"""
Repository layer: query helpers for each table.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from app.models import Event, Participant, User, Venue
from app.models.participant import ACTIVE_STATUSES


# -------- User repository --------

class UserRepo:
    @staticmethod
    def get_by_id(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(func.lower(User.email) == email.lower()).first()

    @staticmethod
    def exists(db: Session, user_id: str) -> bool:
        return db.query(User.id).filter(User.id == user_id).first() is not None


# -------- Venue repository --------

class VenueRepo:
    @staticmethod
    def find_by_name_and_street(db: Session, name: str, street: str) -> Optional[Venue]:
        return db.query(Venue).filter(Venue.name == name, Venue.street == street).first()

    @staticmethod
    def get_by_id(db: Session, venue_id: str) -> Optional[Venue]:
        return db.query(Venue).filter(Venue.id == venue_id).first()

    @staticmethod
    def create(db: Session, **fields) -> Venue:
        venue = Venue(**fields)
        db.add(venue)
        db.flush()
        return venue


# -------- Event repository --------

class EventRepo:
    @staticmethod
    def get_by_id(db: Session, event_id: str) -> Optional[Event]:
        return db.query(Event).filter(Event.id == event_id).first()

    @staticmethod
    def exists(db: Session, event_id: str) -> bool:
        return db.query(Event.id).filter(Event.id == event_id).first() is not None

    @staticmethod
    def apply_filters(
        query: Query,
        type: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Query:
        if type:
            query = query.filter(Event.type == type)
        if status:
            query = query.filter(Event.status == status)
        if search:
            query = query.filter(or_(
                Event.title.icontains(search, autoescape=True),
                Event.description.icontains(search, autoescape=True),
            ))
        return query

    @staticmethod
    def paginate(query: Query, page: int, limit: int) -> Tuple[List, int]:
        total = query.order_by(None).count()
        offset = (page - 1) * limit
        return query.offset(offset).limit(limit).all(), total

    @staticmethod
    def list_by_organizer(db: Session, organizer_id: str) -> List[Event]:
        return (
            db.query(Event)
            .filter(Event.organizer_id == organizer_id)
            .order_by(Event.created_at.desc())
            .all()
        )

    @staticmethod
    def active_participant_count(db: Session, event_id: str) -> int:
        return db.query(Participant).filter(
            Participant.event_id == event_id,
            Participant.status.in_(ACTIVE_STATUSES),
        ).count()


# -------- Participant repository --------

class ParticipantRepo:
    @staticmethod
    def get_in_event(db: Session, participant_id: str, event_id: str) -> Optional[Participant]:
        return db.query(Participant).filter(
            Participant.id == participant_id,
            Participant.event_id == event_id,
        ).first()

    @staticmethod
    def find_registration(db: Session, user_id: str, event_id: str) -> Optional[Participant]:
        return db.query(Participant).filter(
            Participant.user_id == user_id,
            Participant.event_id == event_id,
        ).first()

    @staticmethod
    def list_for_event(db: Session, event_id: str) -> List[Participant]:
        return (
            db.query(Participant)
            .filter(Participant.event_id == event_id)
            .order_by(Participant.registration_date)
            .all()
        )

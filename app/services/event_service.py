"""
Event creation, lookup, listing, partial update and deletion
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.db import transaction
from app.core.exceptions import NotFoundError, ValidationError
from app.models import Event, EventStatus, Participant
from app.schemas.common import Pagination
from app.schemas.event import EventCreate, EventFilters, EventUpdate
from app.services.repositories import EventRepo, VenueRepo
from app.services.resolvers import resolve_organizer, resolve_venue
from app.services.serializers import serialize_event
from app.utils.dates import to_utc_naive

logger = logging.getLogger(__name__)

# Columns that may never be set to null through an update
NON_NULLABLE_FIELDS = {
    "title", "description", "type", "start_date", "end_date", "capacity",
    "registration_deadline", "status", "tags", "price", "venue_id",
}
DATE_FIELDS = ("start_date", "end_date", "registration_deadline")

class EventService:
    """Service for event lifecycle operations"""

    REQUIRED_FIELDS = ("title", "description", "type", "start_date", "end_date")

    @staticmethod
    def _check_dates(start: datetime, end: datetime, deadline: datetime) -> None:
        if start >= end:
            raise ValidationError("Start date must be before end date", details=["start_date", "end_date"])
        if deadline >= start:
            raise ValidationError(
                "Registration deadline must be before start date",
                details=["registration_deadline", "start_date"],
            )

    @staticmethod
    def _get_or_404(db: Session, event_id: str) -> Event:
        event = EventRepo.get_by_id(db, event_id)
        if not event:
            raise NotFoundError("Event")
        return event

    @staticmethod
    def _insert_event(db: Session, **fields) -> Event:
        event = Event(**fields)
        db.add(event)
        db.flush()
        return event

    @staticmethod
    def _create_in_transaction(
        db: Session,
        payload: EventCreate,
        start: datetime,
        end: datetime,
        deadline: datetime,
        capacity: int,
    ) -> str:
        if payload.venue_id:
            if not VenueRepo.get_by_id(db, payload.venue_id):
                raise NotFoundError("Venue")
            venue_id = payload.venue_id
        else:
            venue_id = resolve_venue(db, payload.venue, capacity)

        organizer_id = resolve_organizer(db, payload.organizer_id)

        event = EventService._insert_event(
            db,
            title=payload.title.strip(),
            description=payload.description,
            type=payload.type,
            start_date=start,
            end_date=end,
            registration_deadline=deadline,
            capacity=capacity,
            status=payload.status,
            image=payload.image,
            tags=list(payload.tags),
            price=payload.price,
            organizer_id=organizer_id,
            venue_id=venue_id,
        )
        return event.id

    @staticmethod
    def create_event(db: Session, payload: EventCreate) -> Dict[str, Any]:
        """Create an event together with its venue in a single transaction.

        Venue and organizer resolution plus the event insert commit or roll
        back as one unit. Transient connection failures re-run the whole
        transaction up to ``TRANSACTION_RETRIES`` times.
        """
        missing = []
        for name in EventService.REQUIRED_FIELDS:
            value = getattr(payload, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        if missing:
            raise ValidationError.missing_fields(missing)

        try:
            start = to_utc_naive(payload.start_date)
            end = to_utc_naive(payload.end_date)
            deadline = to_utc_naive(payload.registration_deadline)
            if deadline is None:
                deadline = start - timedelta(hours=settings.DEFAULT_REGISTRATION_WINDOW_HOURS)
        except OverflowError:
            raise ValidationError("Event dates are out of range", details=["start_date"])
        EventService._check_dates(start, end, deadline)

        capacity = payload.capacity or settings.DEFAULT_EVENT_CAPACITY

        attempts = settings.TRANSACTION_RETRIES + 1
        for attempt in range(1, attempts + 1):
            try:
                with transaction(db):
                    event_id = EventService._create_in_transaction(
                        db, payload, start, end, deadline, capacity
                    )
                break
            except OperationalError:
                if attempt >= attempts:
                    raise
                logger.warning("Event creation failed on attempt %s/%s, retrying", attempt, attempts)

        event = EventService._get_or_404(db, event_id)
        logger.info("Created event '%s' (%s)", event.title, event.id)
        return serialize_event(event)

    @staticmethod
    def get_event(db: Session, event_id: str) -> Dict[str, Any]:
        return serialize_event(EventService._get_or_404(db, event_id))

    @staticmethod
    def list_events(db: Session, filters: EventFilters) -> Tuple[List[Dict[str, Any]], Pagination]:
        """Filtered, paginated event listing"""
        query = EventRepo.apply_filters(
            db.query(Event),
            type=filters.type,
            status=filters.status,
            search=filters.search,
        ).order_by(Event.start_date)

        events, total = EventRepo.paginate(query, filters.page, filters.limit)
        return [serialize_event(e) for e in events], Pagination.build(filters.page, filters.limit, total)

    @staticmethod
    def list_public_events(db: Session, filters: EventFilters) -> Tuple[List[Dict[str, Any]], Pagination]:
        """Published events only, whatever status filter was asked for"""
        public = filters.model_copy(update={"status": EventStatus.published})
        return EventService.list_events(db, public)

    @staticmethod
    def update_event(db: Session, event_id: str, patch: EventUpdate) -> Dict[str, Any]:
        """Apply only the fields present in ``patch``; an empty patch writes nothing"""
        event = EventService._get_or_404(db, event_id)

        changes = patch.model_dump(exclude_unset=True)
        if not changes:
            return serialize_event(event)

        nulls = sorted(name for name, value in changes.items() if value is None and name in NON_NULLABLE_FIELDS)
        if nulls:
            raise ValidationError(f"Fields cannot be null: {', '.join(nulls)}", details=nulls)

        try:
            for name in DATE_FIELDS:
                if name in changes:
                    changes[name] = to_utc_naive(changes[name])
        except OverflowError:
            raise ValidationError("Event dates are out of range", details=[name])

        EventService._check_dates(
            changes.get("start_date", event.start_date),
            changes.get("end_date", event.end_date),
            changes.get("registration_deadline", event.registration_deadline),
        )

        if "venue_id" in changes and not VenueRepo.get_by_id(db, changes["venue_id"]):
            raise NotFoundError("Venue")

        for field, value in changes.items():
            setattr(event, field, value)

        db.commit()
        db.refresh(event)
        logger.info("Updated event %s (%s)", event_id, ", ".join(sorted(changes)))
        return serialize_event(event)

    @staticmethod
    def delete_event(db: Session, event_id: str) -> Dict[str, Any]:
        """Delete an event and its registrations, returning what was removed"""
        event = EventService._get_or_404(db, event_id)
        snapshot = serialize_event(event)

        db.delete(event)
        db.commit()
        logger.info("Deleted event %s", event_id)
        return snapshot

    @staticmethod
    def list_organized_events(db: Session, organizer_id: str) -> List[Dict[str, Any]]:
        return [serialize_event(e) for e in EventRepo.list_by_organizer(db, organizer_id)]

    @staticmethod
    def list_participations(
        db: Session,
        user_id: str,
        filters: EventFilters,
    ) -> Tuple[List[Dict[str, Any]], Pagination]:
        """Events the user is registered to, with the registration status"""
        query = (
            db.query(Event, Participant)
            .join(Participant, Participant.event_id == Event.id)
            .filter(Participant.user_id == user_id)
        )
        query = EventRepo.apply_filters(
            query,
            type=filters.type,
            status=filters.status,
            search=filters.search,
        ).order_by(Event.start_date)

        rows, total = EventRepo.paginate(query, filters.page, filters.limit)
        results = []
        for event, participant in rows:
            data = serialize_event(event)
            data["participant_id"] = participant.id
            data["participation_status"] = participant.status.value
            results.append(data)
        return results, Pagination.build(filters.page, filters.limit, total)

"""
Participant registration, self-service join and QR check-in
"""

import logging
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import Event, EventStatus, Participant, ParticipantStatus
from app.schemas.participant import ParticipantCreate, ParticipantUpdate
from app.services.qr_service import QRService
from app.services.repositories import EventRepo, ParticipantRepo, UserRepo
from app.services.serializers import serialize_participant
from app.utils.dates import to_utc_naive, utcnow

logger = logging.getLogger(__name__)

class ParticipantService:
    """Service for participant registrations scoped to an event"""

    @staticmethod
    def _require_event(db: Session, event_id: str) -> Event:
        event = EventRepo.get_by_id(db, event_id)
        if not event:
            raise NotFoundError("Event")
        return event

    @staticmethod
    def _get_or_404(db: Session, participant_id: str, event_id: str) -> Participant:
        participant = ParticipantRepo.get_in_event(db, participant_id, event_id)
        if not participant:
            raise NotFoundError("Participant")
        return participant

    @staticmethod
    def _insert(db: Session, **fields) -> Participant:
        """Insert a registration; the (user, event) unique constraint backs the pre-check.

        Only a registration that now exists for the pair maps to a conflict;
        any other integrity failure propagates.
        """
        participant = Participant(registration_date=utcnow(), **fields)
        db.add(participant)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            if ParticipantRepo.find_registration(db, fields["user_id"], fields["event_id"]):
                raise ConflictError("Participant already registered")
            raise
        db.refresh(participant)
        return participant

    @staticmethod
    def list_participants(db: Session, event_id: str) -> List[Dict[str, Any]]:
        """All registrations of an event, each with its check-in QR code"""
        if not EventRepo.exists(db, event_id):
            raise NotFoundError("Event")

        return [serialize_participant(p) for p in ParticipantRepo.list_for_event(db, event_id)]

    @staticmethod
    def register_participant(db: Session, event_id: str, payload: ParticipantCreate) -> Dict[str, Any]:
        if not payload.user_id:
            raise ValidationError.missing_fields(["user_id"])

        if not EventRepo.exists(db, event_id):
            raise NotFoundError("Event")
        if not UserRepo.exists(db, payload.user_id):
            raise NotFoundError("User")

        if ParticipantRepo.find_registration(db, payload.user_id, event_id):
            raise ConflictError("Participant already registered")

        participant = ParticipantService._insert(
            db,
            user_id=payload.user_id,
            event_id=event_id,
            status=payload.status,
            company=payload.company,
            job_title=payload.job_title,
            dietary_restrictions=payload.dietary_restrictions,
            special_requirements=payload.special_requirements,
        )
        logger.info("Registered user %s to event %s as participant %s", payload.user_id, event_id, participant.id)
        return serialize_participant(participant)

    @staticmethod
    def get_participant(db: Session, participant_id: str, event_id: str) -> Dict[str, Any]:
        return serialize_participant(ParticipantService._get_or_404(db, participant_id, event_id))

    @staticmethod
    def update_participant(
        db: Session,
        participant_id: str,
        event_id: str,
        patch: ParticipantUpdate,
    ) -> Dict[str, Any]:
        """Apply only the supplied fields"""
        participant = ParticipantService._get_or_404(db, participant_id, event_id)

        changes = patch.model_dump(exclude_unset=True)
        if not changes:
            return serialize_participant(participant)

        if "status" in changes and changes["status"] is None:
            raise ValidationError("Fields cannot be null: status", details=["status"])

        if "feedback_submitted_at" in changes:
            changes["feedback_submitted_at"] = to_utc_naive(changes["feedback_submitted_at"])
        elif changes.get("feedback_rating") is not None:
            changes["feedback_submitted_at"] = utcnow()

        for field, value in changes.items():
            setattr(participant, field, value)

        db.commit()
        db.refresh(participant)
        logger.info("Updated participant %s (%s)", participant_id, ", ".join(sorted(changes)))
        return serialize_participant(participant)

    @staticmethod
    def delete_participant(db: Session, participant_id: str, event_id: str) -> Dict[str, Any]:
        participant = ParticipantService._get_or_404(db, participant_id, event_id)
        snapshot = serialize_participant(participant, with_token=False)

        db.delete(participant)
        db.commit()
        logger.info("Removed participant %s from event %s", participant_id, event_id)
        return snapshot

    @staticmethod
    def join_event(db: Session, event_id: str, user_id: str) -> Dict[str, Any]:
        """Self-registration of the authenticated user to a published event"""
        event = EventRepo.get_by_id(db, event_id)
        if not event or event.status != EventStatus.published:
            raise NotFoundError("Published event")

        if not UserRepo.exists(db, user_id):
            raise NotFoundError("User")

        if ParticipantRepo.find_registration(db, user_id, event_id):
            raise ConflictError("You are already registered for this event")

        if EventRepo.active_participant_count(db, event_id) >= event.capacity:
            raise ConflictError("Event is full")

        if utcnow() > event.registration_deadline:
            raise ValidationError("Registration deadline has passed")

        participant = ParticipantService._insert(db, user_id=user_id, event_id=event_id)
        logger.info("User %s joined event %s", user_id, event_id)
        return serialize_participant(participant)

    @staticmethod
    def check_in(db: Session, qr_payload: str) -> Dict[str, Any]:
        """Mark the scanned participant as attended.

        Scanning an already checked-in participant succeeds again and reports
        ``was_already_checked_in``.
        """
        token = QRService.decode_payload(qr_payload)

        participant = ParticipantRepo.get_in_event(db, token.participant_id, token.event_id)
        if not participant:
            raise NotFoundError("Participant")

        if participant.user_id != token.user_id:
            raise ValidationError("QR code does not match this registration")

        if participant.status == ParticipantStatus.cancelled:
            raise ConflictError("Registration was cancelled")

        was_checked_in = participant.status == ParticipantStatus.attended
        if not was_checked_in:
            participant.status = ParticipantStatus.attended
            db.commit()
            db.refresh(participant)
            logger.info("Checked in participant %s for event %s", participant.id, participant.event_id)

        return {
            "participant": serialize_participant(participant, with_token=False),
            "was_already_checked_in": was_checked_in,
        }

"""
Find-or-create helpers used while creating events
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.schemas.event import VenueInput
from app.services.repositories import UserRepo, VenueRepo

logger = logging.getLogger(__name__)

PLACEHOLDER_VENUE_NAME = "To be defined"
PLACEHOLDER_VENUE_STREET = "To be defined"
UNSPECIFIED = "Unspecified"


def resolve_venue(db: Session, candidate: Optional[VenueInput], capacity: Optional[int] = None) -> str:
    """Return the id of the venue matching (name, street), creating it if needed.

    Without a candidate a placeholder venue is created. Writes are flushed,
    not committed: the caller owns the transaction.
    """
    capacity = capacity or settings.DEFAULT_VENUE_CAPACITY

    if candidate is None:
        venue = VenueRepo.create(
            db,
            name=PLACEHOLDER_VENUE_NAME,
            street=PLACEHOLDER_VENUE_STREET,
            city=UNSPECIFIED,
            country=UNSPECIFIED,
            capacity=capacity,
            facilities=[],
        )
        logger.info("Created placeholder venue %s", venue.id)
        return venue.id

    existing = VenueRepo.find_by_name_and_street(db, candidate.name, candidate.address)
    if existing:
        return existing.id

    venue = VenueRepo.create(
        db,
        name=candidate.name,
        street=candidate.address,
        city=candidate.city or UNSPECIFIED,
        country=candidate.country or UNSPECIFIED,
        capacity=candidate.capacity or capacity,
        facilities=list(candidate.facilities),
    )
    logger.info("Created venue %s (%s, %s)", venue.id, venue.name, venue.street)
    return venue.id


def resolve_organizer(db: Session, organizer_id: Optional[str]) -> str:
    """Return the organizer id after checking the account exists.

    No default account is ever synthesized: an event needs an explicit
    organizer.
    """
    if not organizer_id:
        raise ValidationError.missing_fields(["organizer_id"])

    if not UserRepo.exists(db, organizer_id):
        raise NotFoundError("Organizer")

    return organizer_id

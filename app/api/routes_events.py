"""
Event API routes
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.db import get_db
from app.models import EventStatus
from app.schemas.event import EventCreate, EventFilters, EventUpdate
from app.services.event_service import EventService
from app.utils.responses import success_response
from app.utils.security import get_current_user_id, get_optional_user_id

router = APIRouter()

def event_filters(
    type: Optional[str] = Query(None),
    status: Optional[EventStatus] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> EventFilters:
    return EventFilters(type=type, status=status, search=search, page=page, limit=limit)

@router.get("/events")
def list_events(
    filters: EventFilters = Depends(event_filters),
    db: Session = Depends(get_db)
):
    """List events with optional type/status/search filters"""
    events, pagination = EventService.list_events(db, filters)
    return success_response(data=events, pagination=pagination)

@router.post("/events", status_code=201)
def create_event(
    payload: EventCreate,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_optional_user_id)
):
    """Create an event, its venue and organizer link in one transaction"""
    if not payload.organizer_id:
        payload.organizer_id = user_id

    event = EventService.create_event(db, payload)
    return success_response(data=event, message="Event created successfully", status_code=201)

@router.get("/events/public")
def list_public_events(
    type: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db)
):
    """Published catalogue with registration counts"""
    filters = EventFilters(type=type, search=search, page=page, limit=limit)
    events, pagination = EventService.list_public_events(db, filters)
    return success_response(data=events, pagination=pagination)

@router.get("/events/my-events")
def list_my_events(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Events organized by the authenticated user"""
    return success_response(data=EventService.list_organized_events(db, user_id))

@router.get("/events/my-participations")
def list_my_participations(
    filters: EventFilters = Depends(event_filters),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Events the authenticated user registered to"""
    events, pagination = EventService.list_participations(db, user_id, filters)
    return success_response(data=events, pagination=pagination)

@router.get("/events/{event_id}")
def get_event(event_id: str, db: Session = Depends(get_db)):
    """Fetch one event with organizer and venue"""
    return success_response(data=EventService.get_event(db, event_id))

@router.put("/events/{event_id}")
def update_event(
    event_id: str,
    patch: EventUpdate,
    db: Session = Depends(get_db)
):
    """Partial update: only fields present in the body change"""
    return success_response(data=EventService.update_event(db, event_id, patch))

@router.delete("/events/{event_id}")
def delete_event(event_id: str, db: Session = Depends(get_db)):
    """Delete an event and return the removed record"""
    event = EventService.delete_event(db, event_id)
    return success_response(data=event, message="Event deleted successfully")

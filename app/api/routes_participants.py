"""
Participant registration and check-in routes
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.schemas.participant import CheckInRequest, ParticipantCreate, ParticipantUpdate
from app.services.participant_service import ParticipantService
from app.services.qr_service import QRService
from app.utils.responses import success_response
from app.utils.security import enforce_rate_limit, get_current_user_id

router = APIRouter()

@router.post("/events/check-in", dependencies=[Depends(enforce_rate_limit)])
def check_in(checkin_data: CheckInRequest, db: Session = Depends(get_db)):
    """Check in the participant identified by a scanned QR payload"""
    result = ParticipantService.check_in(db, checkin_data.qrCode)

    message = "You were already checked in!" if result["was_already_checked_in"] else "Check-in successful"
    return success_response(data=result, message=message)

@router.get("/events/{event_id}/participants")
def list_participants(event_id: str, db: Session = Depends(get_db)):
    """List registrations with their check-in QR codes"""
    return success_response(data=ParticipantService.list_participants(db, event_id))

@router.post("/events/{event_id}/participants", status_code=201)
def register_participant(
    event_id: str,
    payload: ParticipantCreate,
    db: Session = Depends(get_db)
):
    """Register a user to an event"""
    participant = ParticipantService.register_participant(db, event_id, payload)
    return success_response(data=participant, message="Participant registered", status_code=201)

@router.post("/events/{event_id}/join", status_code=201)
def join_event(
    event_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Register the authenticated user to a published event"""
    participant = ParticipantService.join_event(db, event_id, user_id)
    return success_response(data=participant, message="Registration successful", status_code=201)

@router.get("/events/{event_id}/participants/{participant_id}")
def get_participant(event_id: str, participant_id: str, db: Session = Depends(get_db)):
    return success_response(data=ParticipantService.get_participant(db, participant_id, event_id))

@router.put("/events/{event_id}/participants/{participant_id}")
def update_participant(
    event_id: str,
    participant_id: str,
    patch: ParticipantUpdate,
    db: Session = Depends(get_db)
):
    participant = ParticipantService.update_participant(db, participant_id, event_id, patch)
    return success_response(data=participant)

@router.delete("/events/{event_id}/participants/{participant_id}")
def delete_participant(event_id: str, participant_id: str, db: Session = Depends(get_db)):
    participant = ParticipantService.delete_participant(db, participant_id, event_id)
    return success_response(data=participant, message="Participant removed")

@router.get("/events/{event_id}/participants/{participant_id}/qr.png")
def get_participant_qr(event_id: str, participant_id: str, db: Session = Depends(get_db)):
    """Check-in QR code as a PNG image"""
    participant = ParticipantService.get_participant(db, participant_id, event_id)

    qr_bytes = QRService.generate_png(participant["id"], participant["event_id"], participant["user_id"])

    return Response(
        content=qr_bytes,
        media_type="image/png",
        headers={"Content-Disposition": f"inline; filename=checkin_{participant_id}.png"}
    )
